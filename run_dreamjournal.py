#!/usr/bin/env python3
"""
DreamJournal launcher script.

Run this from the project root to open the dream library:

    python run_dreamjournal.py [path/to/dreams.json]
"""

if __name__ == '__main__':
    from dreamjournal.run_gui import main
    main()
