"""Shared constants for scoring configuration and prompt assembly.

Constants
---------
MIN_TEMPERATURE, MAX_TEMPERATURE : float
    Allowed sampling temperature range for OpenAI API requests.
MIN_SCORE, MAX_SCORE : float
    Bounds every parsed score is clamped into.
MAX_REPOS_IN_PROMPT : int
    Repositories listed in the profile section and the code section.
MAX_FILES_IN_PROMPT_PER_REPO : int
    Sampled files shown per repository.
PREVIEW_CHAR_LIMIT : int
    Characters of each file included in the prompt.
MAX_DESCRIPTIONS_IN_PROMPT, DESCRIPTION_CHAR_LIMIT : int
    Number and length of project descriptions in the profile summary.
JOB_DESCRIPTION_CHAR_LIMIT : int
    Characters of job description text forwarded to the model.

"""

from __future__ import annotations

# Validation bounds for temperature (OpenAI API range)
MIN_TEMPERATURE: float = 0.0
MAX_TEMPERATURE: float = 2.0

MIN_SCORE: float = 0.0
MAX_SCORE: float = 100.0

MAX_REPOS_IN_PROMPT: int = 12
MAX_FILES_IN_PROMPT_PER_REPO: int = 18
PREVIEW_CHAR_LIMIT: int = 800
MAX_DESCRIPTIONS_IN_PROMPT: int = 6
DESCRIPTION_CHAR_LIMIT: int = 80
JOB_DESCRIPTION_CHAR_LIMIT: int = 4000
