"""
Allows ``python -m tagver version`` in environments without the console script.
"""

from .cli import main

if __name__ == "__main__":
    main()
