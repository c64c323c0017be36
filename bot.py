#!/usr/bin/env python3
"""
Dota League Bot - Entry Point

Telegram bot that announces league games as they draft, start and finish.
The actual implementation is in the dotabot package.
"""

if __name__ == "__main__":
    from dotabot import main
    main()
