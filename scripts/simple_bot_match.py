#!/usr/bin/env python3
"""Simple bot match - random bots playing Settlers of Oregon against each other."""

from oregon.env.bot_match import main

if __name__ == "__main__":
    main()
