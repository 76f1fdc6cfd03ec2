# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` for everything else. Only the switches below are read from here.
"""

# Example: keep reminders but turn off the nightly sweep while testing
# END_OF_DAY_ENABLED = False

# Example: no weekend planning prompt
# WEEKEND_PLANNING_ENABLED = False

# Example: silence reminders entirely
# REMINDERS_ENABLED = False
