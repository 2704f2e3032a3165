from dataclasses import fields, replace


class _Unset:
    """Marker for a patch field the caller did not touch."""

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()


class Patch:
    """Mixin for patch dataclasses: every field defaults to UNSET."""

    def changes(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def apply(self, record, **forced):
        """Return a copy of record with the set fields (and forced ones) overridden."""
        return replace(record, **{**self.changes(), **forced})
