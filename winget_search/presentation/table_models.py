from PySide6.QtCore import QAbstractTableModel, QModelIndex, QPersistentModelIndex, Qt

from winget_search.core.winget_types import ResultEntry


class ResultTableModel(QAbstractTableModel):
    """Lightweight table model backed by ResultEntry rows, in winget's order."""

    _HEADERS = ("Package", "Details", "Id")

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._rows: list[ResultEntry] = []

    def rowCount(
        self,
        /,
        parent: QModelIndex | QPersistentModelIndex = QModelIndex(),
    ) -> int:
        if parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(
        self,
        /,
        parent: QModelIndex | QPersistentModelIndex = QModelIndex(),
    ) -> int:
        if parent.isValid():
            return 0
        return len(self._HEADERS)

    def data(
        self,
        index: QModelIndex | QPersistentModelIndex,
        /,
        role: int = Qt.ItemDataRole.DisplayRole,
    ) -> object | None:
        if not index.isValid():
            return None

        row = self._rows[index.row()]
        if role == Qt.ItemDataRole.ToolTipRole:
            return row.subtitle or None
        if role not in (Qt.ItemDataRole.DisplayRole, Qt.ItemDataRole.EditRole):
            return None

        column = index.column()
        if column == 0:
            return row.title
        if column == 1:
            return row.subtitle
        if column == 2:
            return row.package_id or ""
        return None

    def headerData(
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole,
    ):
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation != Qt.Orientation.Horizontal:
            return None
        if 0 <= section < len(self._HEADERS):
            return self._HEADERS[section]
        return None

    def set_results(self, rows: list[ResultEntry]) -> None:
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def entry_at(self, row: int) -> ResultEntry | None:
        if 0 <= row < len(self._rows):
            return self._rows[row]
        return None
