#!/usr/bin/env python3
"""
GUI launcher — entry point for dupelist-gui command.
"""
import sys
from typing import Optional

from PySide6.QtWidgets import QApplication
from dupelist.core.models import ListingConfig, SearchState
from dupelist.gui.main_window import ListingWindow


def main(state: Optional[SearchState] = None, config: Optional[ListingConfig] = None) -> int:
    app = QApplication.instance() or QApplication(sys.argv)
    window = ListingWindow(config=config)
    window.show()
    if state is not None:
        window.start_search(state)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
