from __future__ import annotations

from dataclasses import dataclass

from sovan_pos_app.app.state import Route


@dataclass(frozen=True)
class MenuEntry:
    key: str
    label: str
    route: Route | None


DASHBOARD_MENU: tuple[MenuEntry, ...] = (
    MenuEntry("inventory", "Lihat Inventory", Route.INVENTORY),
    MenuEntry("create_transaction", "Buat Transaksi", Route.CREATE_TRANSACTION),
    MenuEntry("visitors", "Monitoring Pengunjung", Route.VISITORS),
    MenuEntry("logout", "Logout", None),
)


def menu_labels() -> list[str]:
    return [entry.label for entry in DASHBOARD_MENU]


def find_entry(key: str) -> MenuEntry:
    for entry in DASHBOARD_MENU:
        if entry.key == key:
            return entry
    raise KeyError(key)
