from pathlib import Path
from typing import Any, Optional

from PyQt5.QtCore import QRect, QRectF, Qt
from PyQt5.QtGui import QColor, QImage, QPainter, QPixmap
from PyQt5.QtWidgets import (
    QButtonGroup,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from IM_Libs.constants import (
    CANVAS_BACKGROUND_COLOR,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    MAX_BRUSH_DIAMETER,
    MIN_BRUSH_DIAMETER,
    MIN_CANVAS_SIZE,
    STANDARD_IMAGE_FILTER,
)
from IM_Libs.MaskEditingLib.coordinate_mapper import fitted_display_rect, map_to_display
from IM_Libs.MaskEditingLib.mask_errors import ImageDecodeError, MaskExportError
from IM_Libs.MaskEditingLib.mask_models import BrushMode, DisplayRect
from IM_Libs.MaskEditingLib.mask_output import MaskFileUploader
from IM_Libs.MaskEditingLib.mask_preview import compose_preview
from IM_Libs.MaskEditingLib.mask_session import MaskEditingSession


def pil_to_qimage(image: Any) -> Optional[QImage]:
    try:
        from PIL.ImageQt import ImageQt

        qimage = QImage(ImageQt(image.convert("RGBA"))).copy()
        if not qimage.isNull():
            return qimage
    except ImportError:
        pass

    from io import BytesIO

    buffer = BytesIO()
    image.save(buffer, format="PNG")
    qimage = QImage.fromData(buffer.getvalue(), "PNG")
    return None if qimage.isNull() else qimage


class MaskCanvas(QWidget):
    """Shows the image with contain scaling and feeds mouse drags to the session."""

    def __init__(self, session: MaskEditingSession, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session
        self._pixmap: Optional[QPixmap] = None
        self.setMinimumSize(MIN_CANVAS_SIZE, MIN_CANVAS_SIZE)
        self.setCursor(Qt.CrossCursor)

    def display_rect(self) -> DisplayRect:
        # Events arrive in widget coordinates, so the element origin is (0, 0)
        return DisplayRect(left=0, top=0, width=self.width(), height=self.height())

    def refresh(self) -> None:
        """Rebuild the whole preview after a load or a clear."""
        self.session.take_dirty_box()
        if self.session.image is None or self.session.raster is None:
            self._pixmap = None
        else:
            qimage = pil_to_qimage(compose_preview(self.session.image, self.session.raster))
            self._pixmap = QPixmap.fromImage(qimage) if qimage is not None else None
        self.update()

    def refresh_dirty(self) -> None:
        """Recompose only the raster box touched since the last redraw."""
        box = self.session.take_dirty_box()
        if box is None:
            return
        if self._pixmap is None:
            self.refresh()
            return

        patch = compose_preview(self.session.image.crop(box), self.session.raster.crop(box))
        qimage = pil_to_qimage(patch)
        if qimage is None:
            return

        painter = QPainter(self._pixmap)
        painter.setCompositionMode(QPainter.CompositionMode_Source)
        painter.drawImage(box[0], box[1], qimage)
        painter.end()
        self.update(self._widget_rect(box))

    def _widget_rect(self, box) -> QRect:
        source = self.session.source
        rect = self.display_rect()
        top_left = map_to_display(box[0], box[1], rect, source)
        bottom_right = map_to_display(box[2], box[3], rect, source)
        if top_left is None or bottom_right is None:
            return self.rect()

        left, top = int(top_left[0]) - 1, int(top_left[1]) - 1
        right, bottom = int(bottom_right[0]) + 2, int(bottom_right[1]) + 2
        return QRect(left, top, right - left, bottom - top)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(CANVAS_BACKGROUND_COLOR))

        source = self.session.source
        if self._pixmap is not None and source is not None:
            target = fitted_display_rect(source, self.display_rect())
            if target is not None:
                painter.setRenderHint(QPainter.SmoothPixmapTransform)
                painter.drawPixmap(
                    QRectF(target.left, target.top, target.width, target.height),
                    self._pixmap,
                    QRectF(self._pixmap.rect()),
                )
        painter.end()

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            if self.session.pointer_down(event.x(), event.y(), self.display_rect()):
                self.refresh_dirty()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        if event.buttons() & Qt.LeftButton:
            if self.session.pointer_move(event.x(), event.y(), self.display_rect()):
                self.refresh_dirty()
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self.session.pointer_up()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event) -> None:
        self.session.pointer_leave()
        super().leaveEvent(event)


class MaskEditorWindow(QMainWindow):
    def __init__(self, image_path: Optional[Path] = None) -> None:
        super().__init__()
        self.setWindowTitle("Inpaint Mask Editor")
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)

        self.session = MaskEditingSession(on_mask_change=self.on_mask_changed)

        self._build_ui()
        self._connect_signals()
        self._update_enabled()

        if image_path is not None:
            self.open_image(Path(image_path))

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QHBoxLayout(central)
        controls_col = QVBoxLayout()

        self.btn_load_image = QPushButton("Load Image")
        self.btn_draw = QPushButton("Draw")
        self.btn_erase = QPushButton("Erase")
        self.btn_clear = QPushButton("Clear Mask")
        self.btn_export = QPushButton("Export Mask")

        self.btn_draw.setCheckable(True)
        self.btn_erase.setCheckable(True)
        self.btn_draw.setChecked(self.session.brush.mode is BrushMode.PAINT)
        self.btn_erase.setChecked(self.session.brush.mode is BrushMode.ERASE)
        self.mode_group = QButtonGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_group.addButton(self.btn_draw)
        self.mode_group.addButton(self.btn_erase)

        self.slider_brush = QSlider(Qt.Horizontal)
        self.slider_brush.setRange(MIN_BRUSH_DIAMETER, MAX_BRUSH_DIAMETER)
        self.slider_brush.setValue(int(self.session.brush.diameter))
        self.label_brush = QLabel()
        self._update_brush_label()

        self.label_image_info = QLabel("No image loaded")
        self.canvas = MaskCanvas(self.session, self)

        controls_col.addWidget(self.btn_load_image)
        controls_col.addWidget(self.label_image_info)
        controls_col.addWidget(QLabel("Tool"))
        controls_col.addWidget(self.btn_draw)
        controls_col.addWidget(self.btn_erase)
        controls_col.addWidget(self.label_brush)
        controls_col.addWidget(self.slider_brush)
        controls_col.addWidget(self.btn_clear)
        controls_col.addWidget(self.btn_export)
        controls_col.addStretch(1)

        root.addLayout(controls_col, stretch=0)
        root.addWidget(self.canvas, stretch=1)

    def _connect_signals(self) -> None:
        self.btn_load_image.clicked.connect(self.load_image)
        self.btn_draw.clicked.connect(lambda: self.session.set_mode(BrushMode.PAINT))
        self.btn_erase.clicked.connect(lambda: self.session.set_mode(BrushMode.ERASE))
        self.slider_brush.valueChanged.connect(self.on_brush_size_changed)
        self.btn_clear.clicked.connect(self.clear_mask)
        self.btn_export.clicked.connect(self.export_mask)

    def load_image(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Select Image", "", STANDARD_IMAGE_FILTER)
        if not file_path:
            return
        self.open_image(Path(file_path))

    def open_image(self, image_path: Path) -> None:
        try:
            source = self.session.load_image(image_path)
        except ImageDecodeError as e:
            self.label_image_info.setText("No image loaded")
            QMessageBox.warning(self, "Image Load Failed", str(e))
        else:
            self.label_image_info.setText(f"{image_path.name} ({source.width}x{source.height})")
        self._update_enabled()
        self.canvas.refresh()

    def on_brush_size_changed(self, value: int) -> None:
        self.session.set_brush_diameter(value)
        self._update_brush_label()

    def on_mask_changed(self, data_url: str) -> None:
        self.statusBar().showMessage(f"Mask updated ({len(data_url) // 1024} KB)", 2000)

    def clear_mask(self) -> None:
        self.session.clear()
        self.canvas.refresh()

    def export_mask(self) -> None:
        folder = QFileDialog.getExistingDirectory(self, "Select Mask Directory")
        if not folder:
            return

        uploader = MaskFileUploader(Path(folder))
        try:
            mask = self.session.export(uploader)
        except (MaskExportError, OSError) as e:
            QMessageBox.warning(self, "Export Failed", str(e))
            return

        QMessageBox.information(
            self,
            "Success",
            f"Saved {mask.width}x{mask.height} mask to {folder}",
        )

    def _update_brush_label(self) -> None:
        self.label_brush.setText(f"Brush size: {int(self.session.brush.diameter)}")

    def _update_enabled(self) -> None:
        enabled = self.session.is_enabled
        for widget in (self.btn_draw, self.btn_erase, self.btn_clear, self.btn_export, self.canvas):
            widget.setEnabled(enabled)
