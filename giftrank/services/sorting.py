"""Sort state: column sort plus mutually exclusive quick-sort toggles"""

from typing import Optional

from ..schemas.query import SortDirection, SortKey, SortSpec, SortToggle

TOGGLE_SPECS = {
    SortToggle.BEST_VALUE: SortSpec(key=SortKey.VALUE, direction=SortDirection.DESC),
    SortToggle.MOST_POPULAR: SortSpec(key=SortKey.POP_RATING, direction=SortDirection.DESC),
}


def default_direction(key: SortKey) -> SortDirection:
    """Text columns start ascending, numeric columns descending"""
    return SortDirection.ASC if key.is_text else SortDirection.DESC


class SortState:
    """
    Holds the active sort spec

    Every setter replaces the whole spec at once, so the spec handed to the
    query pipeline is always the effective one.
    """

    def __init__(self, spec: SortSpec = None, toggle: Optional[SortToggle] = None):
        self.column_spec = spec or SortSpec()
        self.toggle = toggle

    @property
    def spec(self) -> SortSpec:
        if self.toggle is not None:
            return TOGGLE_SPECS[self.toggle]
        return self.column_spec

    def select_column(self, key: SortKey) -> SortSpec:
        """
        Sort by a column

        Clicking the active column flips its direction; any other column (or
        any column while a toggle is active) starts in its default direction.
        A column click always deactivates the toggle.
        """

        key = SortKey(key)
        toggle_was_active = self.toggle is not None
        self.toggle = None

        if self.column_spec.key == key and not toggle_was_active:
            self.column_spec = SortSpec(key=key, direction=self.column_spec.direction.flipped())
        else:
            self.column_spec = SortSpec(key=key, direction=default_direction(key))

        return self.spec

    def set_toggle(self, toggle: SortToggle) -> SortSpec:
        """Activate a toggle, or deactivate it when it is already on"""

        toggle = SortToggle(toggle)
        self.toggle = None if self.toggle == toggle else toggle
        return self.spec

    def toggle_best_value(self) -> SortSpec:
        return self.set_toggle(SortToggle.BEST_VALUE)

    def toggle_most_popular(self) -> SortSpec:
        return self.set_toggle(SortToggle.MOST_POPULAR)

    def __repr__(self):
        return f"<SortState(spec={self.spec!r}, toggle={self.toggle})>"
