from PySide6.QtCore import QModelIndex
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHeaderView,
    QLineEdit,
    QMainWindow,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from winget_search.application.winget_plugin import PLUGIN_NAME, Theme, WingetPlugin
from winget_search.presentation.table_models import ResultTableModel


class MainWindow(QMainWindow):
    """Standalone host for the winget plugin: one search box, one result table."""

    def __init__(self, plugin: WingetPlugin | None = None) -> None:
        super().__init__()
        self.setWindowTitle(PLUGIN_NAME)
        self.resize(900, 520)

        self.plugin = plugin if plugin is not None else WingetPlugin(parent=self)
        self.plugin.init(Theme.DARK)
        self.plugin.error.connect(self.on_plugin_error)

        self.line_edit_search = QLineEdit(self)
        self.line_edit_search.setPlaceholderText(
            "Search winget packages, or press Enter on an empty box"
        )
        self.line_edit_search.returnPressed.connect(self.on_search_requested)

        self.model = ResultTableModel(self)
        self.table_view = QTableView(self)
        self.table_view.setModel(self.model)
        self.table_view.doubleClicked.connect(self.on_result_activated)
        self._polish_table()

        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.addWidget(self.line_edit_search)
        layout.addWidget(self.table_view)
        self.setCentralWidget(central)

    def _polish_table(self) -> None:
        tv = self.table_view
        tv.verticalHeader().setVisible(False)

        hh = tv.horizontalHeader()
        hh.setStretchLastSection(True)
        hh.setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        hh.setSectionResizeMode(1, QHeaderView.ResizeMode.ResizeToContents)

        tv.setWordWrap(False)
        tv.setAlternatingRowColors(True)
        tv.setShowGrid(False)
        tv.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        tv.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)

    def on_search_requested(self) -> None:
        text = self.line_edit_search.text()
        self.statusBar().showMessage("Searching...")
        results = self.plugin.query(text)
        self.model.set_results(results)
        if results:
            self.table_view.setCurrentIndex(self.model.index(0, 0))
        self.statusBar().showMessage(f"{len(results)} results", 2000)

    def on_result_activated(self, index: QModelIndex) -> None:
        entry = self.model.entry_at(index.row())
        if entry is None:
            return
        if self.plugin.activate(entry) and entry.package_id:
            self.statusBar().showMessage(f"Installing: {entry.package_id}", 4000)

    def on_plugin_error(self, message: str) -> None:
        self.statusBar().showMessage(message, 4000)
