"""QApplication bootstrap."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from layerdesk.config.constants import APP_NAME, ORG_DOMAIN, ORG_NAME
from layerdesk.main_window import LayerManagementWindow


def main() -> None:
    """Launch the layer management window over a fresh collection."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(ORG_NAME)
    app.setOrganizationDomain(ORG_DOMAIN)
    window = LayerManagementWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
