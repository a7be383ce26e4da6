"""
Control Panel
=============
Sliders for every shape parameter plus reset, presets and a collapse toggle.

The panel never touches geometry: it writes partial updates through the
controller and refreshes its displays when the store reports a change.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGroupBox, QGridLayout, QLabel, QSlider, QComboBox,
    QPushButton, QHBoxLayout, QSizePolicy
)

from trefoil.controller.knot import KnotController
from trefoil.model.parameters import ShapeParameters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SliderSpec:
    key: str
    label: str
    minimum: float
    maximum: float
    step: float
    decimals: int = 1

    @property
    def ticks(self) -> int:
        return round((self.maximum - self.minimum) / self.step)

    def to_tick(self, value: float) -> int:
        return min(self.ticks, max(0, round((value - self.minimum) / self.step)))

    def from_tick(self, tick: int) -> float:
        value = self.minimum + tick * self.step
        return int(round(value)) if self.decimals == 0 else round(value, self.decimals)

    def format(self, value: float) -> str:
        return f"{int(round(value))}" if self.decimals == 0 else f"{value:.{self.decimals}f}"


# Grouped as in the panel: amplitude, lobe shape, tube, tessellation
SLIDER_GROUPS: tuple[tuple[str, tuple[SliderSpec, ...]], ...] = (
    ("Curve", (
        SliderSpec("magnitude", "Magnitude", 0.5, 5.0, 0.1),
        SliderSpec("frequency", "Frequency", 0.5, 3.0, 0.1),
    )),
    ("Lobes", (
        SliderSpec("param_a", "Param A", 0.0, 2.5, 0.1),
        SliderSpec("param_b", "Param B", 0.0, 2.5, 0.1),
    )),
    ("Tube", (
        SliderSpec("base_radius", "Base Radius", 0.05, 0.5, 0.01, decimals=2),
        SliderSpec("radius_variation", "Variation", 0.0, 10.0, 0.1),
        SliderSpec("variation_frequency", "Var Freq", 1.0, 10.0, 0.5),
        SliderSpec("segment_count", "Segments", 50, 400, 10, decimals=0),
    )),
)

ROTATION_SPEED_SPEC = SliderSpec("rotation_speed", "Spin", 0.0, 3.0, 0.1)


class ControlPanel(QWidget):
    # Signal: emitted after the collapse state changes
    toggled = Signal(bool)

    def __init__(self, controller: KnotController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.is_collapsed = False

        self._sliders: dict[str, QSlider] = {}
        self._value_labels: dict[str, QLabel] = {}
        self._specs: dict[str, SliderSpec] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)

        self.btn_toggle = QPushButton("Hide controls")
        self.btn_toggle.clicked.connect(self.toggle)
        layout.addWidget(self.btn_toggle)

        self.content = QWidget()
        content_layout = QVBoxLayout(self.content)
        content_layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.content)

        for title, specs in SLIDER_GROUPS:
            box = QGroupBox(self.tr(title))
            grid = QGridLayout(box)
            grid.setVerticalSpacing(8)
            for spec in specs:
                self._add_slider(grid, spec)
            content_layout.addWidget(box)

        # --- Animation ---
        grp_anim = QGroupBox(self.tr("Animation"))
        grid_anim = QGridLayout(grp_anim)
        self._add_slider(grid_anim, ROTATION_SPEED_SPEC)

        self.preset_combo = QComboBox()
        self.preset_combo.addItems(list(self.controller.presets))
        self.btn_preset = QPushButton(self.tr("Morph"))
        self.btn_preset.clicked.connect(self.on_preset_clicked)
        hbox = QHBoxLayout()
        hbox.addWidget(self.preset_combo, 1)
        hbox.addWidget(self.btn_preset)
        grid_anim.addLayout(hbox, grid_anim.rowCount(), 0, 1, 3)
        content_layout.addWidget(grp_anim)

        self.btn_reset = QPushButton(self.tr("Reset to defaults"))
        self.btn_reset.clicked.connect(self.controller.reset)
        content_layout.addWidget(self.btn_reset)
        content_layout.addStretch()

        self.controller.store.on_change(self.update_displays)
        self.update_displays(self.controller.get_params())

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @Slot(object)
    def update_displays(self, params: ShapeParameters) -> None:
        """Move sliders and labels to `params` without triggering updates."""
        values = params.to_dict()
        values[ROTATION_SPEED_SPEC.key] = self.controller.state.rotation_speed
        for key, slider in self._sliders.items():
            spec = self._specs[key]
            slider.blockSignals(True)
            slider.setValue(spec.to_tick(values[key]))
            slider.blockSignals(False)
            self._value_labels[key].setText(spec.format(values[key]))

    def toggle(self) -> None:
        self.is_collapsed = not self.is_collapsed
        self.content.setVisible(not self.is_collapsed)
        self.btn_toggle.setText("Show controls" if self.is_collapsed else "Hide controls")
        self.toggled.emit(self.is_collapsed)

    # ------------------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------------------

    def on_slider_changed(self, key: str, tick: int) -> None:
        spec = self._specs[key]
        value = spec.from_tick(tick)
        self._value_labels[key].setText(spec.format(value))

        if key == ROTATION_SPEED_SPEC.key:
            self.controller.set_rotation_speed(value)
            return
        self.controller.set_params({key: value})

    def on_preset_clicked(self) -> None:
        name = self.preset_combo.currentText()
        if name:
            self.controller.apply_preset(name, animate=True)

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _add_slider(self, grid: QGridLayout, spec: SliderSpec) -> QSlider:
        row = grid.rowCount()
        grid.addWidget(QLabel(self.tr(spec.label) + ":"), row, 0)

        slider = QSlider(Qt.Horizontal)
        slider.setRange(0, spec.ticks)
        slider.setSingleStep(1)
        slider.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        slider.valueChanged.connect(lambda tick, k=spec.key: self.on_slider_changed(k, tick))
        grid.addWidget(slider, row, 1)

        value_label = QLabel()
        value_label.setMinimumWidth(40)
        value_label.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        grid.addWidget(value_label, row, 2)

        self._sliders[spec.key] = slider
        self._value_labels[spec.key] = value_label
        self._specs[spec.key] = spec
        return slider
