"""Relay network identifier and asset id to location links."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable

from robopallets.support import EventLog, Origin, ensure_root


@dataclass(frozen=True)
class RelayNetworkChanged:
    """The relay network identifier was updated."""

    network_id: Any


@dataclass(frozen=True)
class AssetLinkAdded:
    """An asset id was linked to a location."""

    asset_id: Any
    location: Any


class XcmInfo:
    """Root-managed cross-chain setup: relay network and asset locations."""

    def __init__(self, events: EventLog | None = None) -> None:
        self.events = events if events is not None else EventLog()
        self.relay_network: Any = None
        self._location_of: dict[Hashable, Hashable] = {}
        self._assetid_of: dict[Hashable, Hashable] = {}

    def set_relay_network(self, origin: Origin, network_id: Any) -> None:
        """Set the relay network identifier."""
        ensure_root(origin)
        self.relay_network = network_id
        self.events.deposit(RelayNetworkChanged(network_id))

    def set_asset_link(self, origin: Origin, asset_id: Hashable, location: Hashable) -> None:
        """Link ``asset_id`` and ``location`` in both directions."""
        ensure_root(origin)
        self._location_of[asset_id] = location
        self._assetid_of[location] = asset_id
        self.events.deposit(AssetLinkAdded(asset_id, location))

    def location_of(self, asset_id: Hashable) -> Any:
        """Location linked to the asset, or None."""
        return self._location_of.get(asset_id)

    def assetid_of(self, location: Hashable) -> Any:
        """Asset id linked to the location, or None."""
        return self._assetid_of.get(location)

    def convert(self, location: Hashable) -> Any:
        """Asset id for a location, or None."""
        return self.assetid_of(location)

    def convert_back(self, asset_id: Hashable) -> Any:
        """Location for an asset id, or None."""
        return self.location_of(asset_id)