"""
Entry point for running ec-launcher as a module.

Usage: python -m ec_launcher [editorconfig-checker arguments]
"""

from ec_launcher.cli import main

if __name__ == "__main__":
    main()
