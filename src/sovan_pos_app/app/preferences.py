from __future__ import annotations

from dataclasses import dataclass

from sovan_pos_sdk import LocalStore

DARK_MODE_KEY = "darkMode"


@dataclass
class Preferences:
    store: LocalStore

    def dark_mode(self) -> bool:
        return self.store.get_item(DARK_MODE_KEY) == "true"

    def set_dark_mode(self, enabled: bool) -> bool:
        self.store.set_item(DARK_MODE_KEY, "true" if enabled else "false")
        return enabled

    def toggle_dark_mode(self) -> bool:
        return self.set_dark_mode(not self.dark_mode())
