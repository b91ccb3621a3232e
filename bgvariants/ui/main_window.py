from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QComboBox,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSplitter,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from bgvariants.core.batch import FolderScanResult, scan_folder
from bgvariants.core.registry import VariantConfig
from bgvariants.core.reporting import (
    build_report_dict,
    ensure_reports_dir,
    write_html_report,
    write_json_report,
)
from bgvariants.core.resolver import Resolution
from bgvariants.profiles import PROFILES, get_profile, profile_config


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Background Variant Resolver")
        self.resize(1200, 720)

        self._root: Optional[Path] = None
        self._config: VariantConfig = profile_config(PROFILES[0])
        self._resolutions: dict[str, Resolution] = {}
        self._summary: Optional[FolderScanResult] = None
        self._tool_version: str = "1.0.0"

        # --- Top controls
        self.folder_label = QLabel("Images Folder:")
        self.folder_edit = QLineEdit()
        self.folder_edit.setPlaceholderText("Select an images folder...")
        self.folder_edit.setReadOnly(True)

        self.pick_btn = QPushButton("Browse...")
        self.scan_btn = QPushButton("Scan")
        self.scan_btn.setEnabled(False)

        self.profile_combo = QComboBox()
        for p in PROFILES:
            self.profile_combo.addItem(p.name)

        self.heights_checkbox = QCheckBox("Read heights")
        self.heights_checkbox.setChecked(False)

        self.export_json_btn = QPushButton("Export JSON")
        self.export_html_btn = QPushButton("Export HTML")
        self.export_json_btn.setEnabled(False)
        self.export_html_btn.setEnabled(False)

        self.summary_label = QLabel("No folder selected.")
        self.summary_label.setTextInteractionFlags(Qt.TextSelectableByMouse)

        # --- Left: base images
        self.base_list = QListWidget()
        self.base_list.setSelectionMode(QAbstractItemView.SingleSelection)

        # --- Right: details
        self.base_header = QLabel("Select a base image to see its variants.")
        self.base_header.setTextInteractionFlags(Qt.TextSelectableByMouse)

        self.record_list = QListWidget()
        self.record_list.setSelectionMode(QAbstractItemView.NoSelection)

        self.diag_list = QListWidget()
        self.diag_list.setSelectionMode(QAbstractItemView.NoSelection)

        right_panel = QWidget()
        right_layout = QVBoxLayout()
        right_layout.addWidget(self.base_header)
        right_layout.addWidget(QLabel("Records (in output order):"))
        right_layout.addWidget(self.record_list, 3)
        right_layout.addWidget(QLabel("Diagnostics:"))
        right_layout.addWidget(self.diag_list, 1)
        right_panel.setLayout(right_layout)

        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(self.base_list)
        splitter.addWidget(right_panel)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 2)

        top_row = QHBoxLayout()
        top_row.addWidget(self.folder_label)
        top_row.addWidget(self.folder_edit, 1)
        top_row.addWidget(self.pick_btn)
        top_row.addWidget(self.profile_combo)
        top_row.addWidget(self.heights_checkbox)
        top_row.addWidget(self.scan_btn)
        top_row.addWidget(self.export_json_btn)
        top_row.addWidget(self.export_html_btn)

        main_layout = QVBoxLayout()
        main_layout.addLayout(top_row)
        main_layout.addWidget(self.summary_label)
        main_layout.addWidget(splitter, 1)

        container = QWidget()
        container.setLayout(main_layout)
        self.setCentralWidget(container)

        self.setStatusBar(QStatusBar())

        # --- Signals
        self.pick_btn.clicked.connect(self.on_pick_folder)
        self.scan_btn.clicked.connect(self.on_scan)
        self.base_list.currentItemChanged.connect(self.on_base_selected)
        self.export_json_btn.clicked.connect(self.on_export_json)
        self.export_html_btn.clicked.connect(self.on_export_html)

    # ----------------------------
    # UI Actions
    # ----------------------------
    def on_pick_folder(self) -> None:
        start_dir = str(self._root) if self._root else str(Path.home())
        folder = QFileDialog.getExistingDirectory(self, "Select Images Folder", start_dir)
        if not folder:
            return

        self._root = Path(folder)
        self.folder_edit.setText(str(self._root))
        self.scan_btn.setEnabled(True)

        self.summary_label.setText("Folder selected. Click Scan.")
        self.statusBar().showMessage("Folder set.", 3000)

    def on_scan(self) -> None:
        if not self._root or not self._root.exists():
            self.statusBar().showMessage("Invalid folder.", 4000)
            return

        self.base_list.clear()
        self.record_list.clear()
        self.diag_list.clear()
        self.base_header.setText("Select a base image to see its variants.")

        self._config = profile_config(get_profile(self.profile_combo.currentText()))
        self._resolutions, self._summary = scan_folder(
            self._root, self._config, self.heights_checkbox.isChecked()
        )

        for name, res in self._resolutions.items():
            variants = max(len(res.records) - 1, 0)
            item = QListWidgetItem(f"{name}    ({variants} variants, {len(res.diagnostics)} issues)")
            item.setData(Qt.UserRole, name)
            self.base_list.addItem(item)

        s = self._summary
        self.summary_label.setText(
            f"Base images: {s.bases_found} | "
            f"Images scanned: {s.images_scanned} | "
            f"Records: {s.records} | "
            f"Orphaned variants: {s.orphans} | "
            f"Errors: {s.errors} | Warnings: {s.warnings}"
        )
        self.statusBar().showMessage(f"Scan complete: {s.bases_found} base images.", 5000)

        self.export_json_btn.setEnabled(True)
        self.export_html_btn.setEnabled(True)

        if self.base_list.count() > 0:
            self.base_list.setCurrentRow(0)
        else:
            self.base_header.setText("No base images found.")

    def on_base_selected(self, current: Optional[QListWidgetItem], previous: Optional[QListWidgetItem]) -> None:
        self.record_list.clear()
        self.diag_list.clear()

        if not current:
            self.base_header.setText("Select a base image to see its variants.")
            return

        res = self._resolutions.get(current.data(Qt.UserRole))
        if not res:
            return

        self.base_header.setText(f"Base: {res.base} | Records: {len(res.records)}")
        for r in res.records:
            self.record_list.addItem(QListWidgetItem(r.describe()))

        if not res.diagnostics:
            self.diag_list.addItem(QListWidgetItem("INFO: No diagnostics."))
        for d in res.diagnostics:
            self.diag_list.addItem(QListWidgetItem(f"{d.level}: {d.message}"))

    # ----------------------------
    # Reporting
    # ----------------------------
    def _build_report(self) -> dict:
        if not self._root:
            raise RuntimeError("No folder selected.")

        return build_report_dict(
            tool_version=self._tool_version,
            profile=self.profile_combo.currentText(),
            config=self._config,
            resolutions=self._resolutions,
            summary=self._summary,
        )

    def _export(self, title: str, filename: str, writer) -> None:
        if not self._root:
            return

        try:
            out_path = ensure_reports_dir(self._root) / filename
            writer(self._build_report(), out_path)
            QMessageBox.information(self, title, f"Saved:\n{out_path}")
        except (OSError, RuntimeError) as e:
            QMessageBox.critical(self, title, f"Failed:\n{e}")

    def on_export_json(self) -> None:
        self._export("Export JSON", "report.json", write_json_report)

    def on_export_html(self) -> None:
        self._export("Export HTML", "report.html", write_html_report)
