"""Transaction types: which transactor runs against which record type."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from transactor.domain.ports.schema import BundleInfo


def sanitize_bundles(bundles: Iterable[object]) -> list[str]:
    """Return ``bundles`` as a sorted, deduplicated list of non-empty strings."""

    return sorted({item for item in bundles if isinstance(item, str) and item.strip()})


@dataclass(eq=False, kw_only=True)
class TransactionType:
    """Binds a target record type, its bundles and a transactor with its settings.

    The transactor id and its settings always move together: choosing a new
    transactor discards the settings of the previous one.
    """

    id: str | None
    label: str
    target_entity_type: str

    _transactor_id: str | None = field(default=None, init=False)
    _transactor_settings: dict[str, object] = field(
        default_factory=dict[str, object], init=False, repr=False
    )
    _bundles: list[str] = field(default_factory=list[str], init=False)
    _options: dict[str, object] = field(default_factory=dict[str, object], init=False, repr=False)

    # Transactor ----------------------------------------------------------------

    @property
    def plugin_id(self) -> str | None:
        return self._transactor_id

    def set_plugin_id(self, plugin_id: str) -> None:
        self._transactor_id = plugin_id
        self._transactor_settings = {}

    @property
    def plugin_settings(self) -> dict[str, object]:
        return dict(self._transactor_settings)

    def set_plugin_settings(self, settings: Mapping[str, object]) -> None:
        self._transactor_settings = dict(settings)

    # Bundles -------------------------------------------------------------------

    @property
    def bundles(self) -> tuple[str, ...]:
        return tuple(self._bundles)

    def set_bundles(self, bundles: Iterable[object]) -> None:
        self._bundles = sanitize_bundles(bundles)

    def get_bundles(
        self,
        *,
        applicable: bool = False,
        bundle_info: BundleInfo | None = None,
    ) -> tuple[str, ...]:
        """Return the explicit bundles, or every bundle of the target type when none are set.

        With ``applicable=False`` an empty tuple means "all bundles". Resolving
        that to concrete names requires ``bundle_info``.
        """

        if self._bundles or not applicable:
            return self.bundles
        if bundle_info is None:
            raise ValueError("bundle_info is required to resolve applicable bundles")
        return tuple(sorted(bundle_info.list_bundles(self.target_entity_type)))

    # Options -------------------------------------------------------------------

    @property
    def options(self) -> dict[str, object]:
        return dict(self._options)

    def get_option(self, name: str, default: object = None) -> object:
        return self._options.get(name, default)

    def set_option(self, name: str, value: object) -> None:
        self._options[name] = value

    def set_options(self, options: Mapping[str, object]) -> None:
        self._options = dict(options)

    # Persistence ---------------------------------------------------------------

    def prepare_for_save(self) -> None:
        """Re-assert invariants right before the type is persisted."""

        if not self.id:
            raise ValueError("transaction type requires an id before it can be saved")
        self._bundles = sanitize_bundles(self._bundles)


def new_transaction_type(
    *,
    id: str | None,  # noqa: A002
    label: str,
    target_entity_type: str,
    transactor_id: str | None = None,
    bundles: Iterable[object] = (),
    options: Mapping[str, object] | None = None,
) -> TransactionType:
    """Build a transaction type with its typed setters applied."""

    transaction_type = TransactionType(id=id, label=label, target_entity_type=target_entity_type)
    if transactor_id is not None:
        transaction_type.set_plugin_id(transactor_id)
    transaction_type.set_bundles(bundles)
    if options:
        transaction_type.set_options(options)
    return transaction_type
