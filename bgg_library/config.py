"""
Configuration settings for the catalog enrichment and backfill pipeline.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent  # Go up one level to workspace root
DATABASE_PATH = Path(os.environ.get("BGG_LIBRARY_DB", str(PROJECT_ROOT / "bgg_library.db")))
# Logs directory for per-run logs
LOGS_DIR = PROJECT_ROOT / "bgg_library_cache" / "logs"

# Model backend configuration
TOGETHER_API_KEY = os.environ.get("TOGETHER_API_KEY")
MODEL_NAME = os.environ.get("TOGETHER_MODEL", "meta-llama/Llama-3.2-11B-Vision-Instruct-Turbo")
MAX_RESPONSE_TOKENS = 1024
TEMPERATURE = 0.1

# Backfill pacing
RATE_LIMIT_DELAY = 1.0  # seconds between external calls
MAX_RETRIES = 2  # additional attempts after a failed call

# Images larger than this are re-encoded before upload
MAX_IMAGE_SIZE_MB = 5.0

# Placeholder substituted with the game title in lookup prompts
TITLE_PLACEHOLDER = "{TITLE}"

AGE_LOOKUP_PROMPT = """You are a board game expert. Given a board game title, provide the recommended minimum age for players.

For the board game titled "{TITLE}", what is the recommended minimum age?

Respond with ONLY a valid JSON object (no markdown, no code blocks):
{
  "suggestedAge": 10,
  "confidence": "high"
}

Guidelines:
- suggestedAge should be a positive integer representing the minimum age (e.g., 8 for "Ages 8+")
- Use "high" confidence if you're certain about this game
- Use "medium" confidence if you're somewhat sure
- Use "low" confidence if you're uncertain
- If you don't recognize the game or can't determine the age, return: { "suggestedAge": null, "confidence": "low" }

Common age ranges for reference:
- Family/Party games: 8-10
- Gateway strategy games: 10-12
- Medium strategy games: 12-14
- Heavy strategy games: 14+
- Children's games: 3-7"""

GAME_LOOKUP_PROMPT = """You are a board game expert with extensive knowledge of BoardGameGeek (BGG).

For the board game titled "{TITLE}", provide what you know about it.

Respond with ONLY a valid JSON object (no markdown, no code blocks):
{
  "title": "Game Name",
  "publisher": "Publisher Name" or null,
  "year": 1995 or null,
  "minPlayers": 2 or null,
  "maxPlayers": 4 or null,
  "playTimeMin": 30 or null,
  "playTimeMax": 60 or null,
  "suggestedAge": 10 or null,
  "description": "A brief 1-2 sentence summary of the game" or null,
  "categories": ["strategy", "trading"] or null,
  "bggRating": 7.2 or null,
  "bggRank": 150 or null,
  "confidence": "high" or "medium" or "low"
}

Guidelines:
- Only provide values you are reasonably sure about; use null for anything you don't know.
- bggRating is the BoardGameGeek average rating on a 0-10 scale with one decimal place.
- bggRank is the BoardGameGeek overall rank, a positive integer.
- suggestedAge is the minimum recommended age (e.g., 8 for "Ages 8+").
- Categories are short tags such as "strategy", "party", "cooperative", "family", "deck-building", "worker-placement", "area-control".
- If you don't recognize the game, return: { "confidence": "low" }"""

BOX_ART_EXTRACTION_PROMPT = """You are an expert at identifying board games from images. You have extensive knowledge about board games, including their descriptions, categories, and BoardGameGeek (BGG) ratings.

IMPORTANT: Images may contain MULTIPLE board game boxes (e.g., shelf photos, collection photos, stacked boxes). You must identify and extract information for EACH visible game.

For EACH board game visible in the image, extract information from TWO sources:
1. Visible Information: What you can see on the box (title, publisher, year, player count, play time)
2. Your Knowledge: If you recognize the game, provide additional information from your board game expertise

Respond with ONLY a valid JSON object containing an array of games (no markdown, no code blocks, just the JSON):
{
  "games": [
    {
      "title": "Game Name" or null if not identifiable,
      "publisher": "Publisher Name" or null,
      "year": 1995 or null,
      "minPlayers": 2 or null,
      "maxPlayers": 4 or null,
      "playTimeMin": 30 or null,
      "playTimeMax": 60 or null,
      "confidence": "high" or "medium" or "low",
      "suggestedAge": 10 or null,
      "description": "A brief description of the game" or null,
      "categories": ["strategy", "trading"] or null,
      "bggRating": 7.2 or null,
      "bggRank": 150 or null
    }
  ]
}

IMPORTANT:
- Return an array even if there's only one game visible.
- For partially visible or obscured games, still include them with "low" confidence and extract what you can.
- Use "high" confidence if the game title is clearly visible and identifiable.
- Use "medium" confidence if the image is somewhat unclear but you can make a reasonable guess.
- Use "low" confidence if the game is very unclear, partially obscured, or you're unsure.
- For description, categories, bggRating, bggRank, and suggestedAge: only provide values if you can see them on the box OR you RECOGNIZE the game.
- Suggested Age should be a positive integer representing the minimum age (e.g., 8 for "Ages 8+").
- BGG Rating should be between 1.0 and 10.0 with one decimal place.
- BGG Rank should be a positive integer.

If this is not an image of board game boxes or no games can be identified, return:
{
  "games": []
}"""
