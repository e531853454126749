import logging
import sys
from pathlib import Path

from PyQt5.QtWidgets import QApplication

from IM_Libs.MaskEditingLib.mask_editor_window import MaskEditorWindow


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    image_path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    window = MaskEditorWindow(image_path)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
