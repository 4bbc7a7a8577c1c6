"""
Flip & Shoot
============

Arcade game core: a flying character dodges scrolling obstacles and incoming
enemies while shooting them down. All tunable parameters are in
game_config.yaml.
"""

import logging

# Create logger for the package
logger = logging.getLogger('flipshoot')

# Don't add handlers here - let the application configure logging

__all__ = ['logger']
