"""
Clean Drops Package
===================

Core game logic for the Clean Drops arcade game: catch the clean water
drops, avoid the polluted ones, before the countdown runs out.

- Session lifecycle (start / pause / resume / reset / end)
- Score bookkeeping
- Drop spawning policy
- Countdown and spawn timers

All tunable parameters are in game_config.yaml.
"""
