# File: streamhealth/livestats/decoders.py
"""
Category decoders for the LiveStats data payload.

Every LVST line carries its data as bracketed containers of pipe separated
fields, for example::

    56.35.767 3.1.0.DEV LVST GP [1|10|UMTS] [State=Fix|NumSatellites=8]

The shared rules live in the ``_split_*`` helpers below. Each category then
decides which containers are positional and which are ``key=value`` lists.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Tuple

from streamhealth.livestats.models import Category

Fields = Dict[str, str]
Decoder = Callable[[str], Fields]

CONTAINER_DELIMITER = "] ["

CONNECTION_KEYS = ("connection_number", "connection_generation", "connection_type")
GPS_CONNECTION_KEYS = ("ConnectionNumber", "ConnectionGeneration", "ConnectionType")

WIFI_INTERFACE_KEYS = ("wifi_interface_name", "count_wifi_networks_scanned")
WIFI_NETWORK_KEYS = ("time_since_detected", "ssid", "rssi", "authentication_method")
WIFI_FIRST_NETWORK_INDEX = 3

CONNECTION_TX_KEYS = (
    "connection_number",
    "generation_number",
    "connection_state",
    "target_bps",
    "sigma_latency",
    "stream_health_percentage",
    "mean_latency",
    "missing_packet_count",
    "total_packet_count",
    "latency_jitter",
    "cathresh_bps",
    "remote_control_bps",
    "received_bps_smoothed",
    "received_bps_instantaneous",
    "reliability",
)

ENCODER_KEYS = (
    "stream_id",
    "total_target_bps",
    "backlog_bps",
    "encoder_bps_to",
    "video_bps",
    "audio_bps",
    "encoder_bps_from",
    "encoder_mode",
    "total_broadcast_time",
    "network_health",
    "ifbgtg_delay",
    "ifb_sound_level",
    "number_of_lost_video_frames",
    "video_ssim",
)


# -------------------------------------------------------------------------
# Shared grammar
# -------------------------------------------------------------------------
def _split_containers(data: str) -> List[str]:
    if not data:
        return []
    return data.split(CONTAINER_DELIMITER)


def _strip_brackets(container: str) -> str:
    return container.replace("[", "").replace("]", "")


def _split_fields(container: str) -> List[str]:
    return _strip_brackets(container).split("|")


def _split_key_value(piece: str) -> Tuple[str, str] | None:
    if "=" not in piece:
        return None
    key, value = piece.split("=", 1)
    return key, value


def _merge_key_values(fields: Fields, pieces: Sequence[str]) -> None:
    for piece in pieces:
        pair = _split_key_value(piece)
        if pair is not None:
            fields[pair[0]] = pair[1]


def _assign_positional(fields: Fields, keys: Sequence[str], pieces: Sequence[str]) -> None:
    for index, key in enumerate(keys):
        fields[key] = pieces[index] if index < len(pieces) else ""


def _decode_connection_containers(data: str, positional_keys: Sequence[str]) -> Fields:
    fields: Fields = {}
    for container in _split_containers(data):
        pieces = _split_fields(container)
        if "=" in container:
            _merge_key_values(fields, pieces)
        else:
            _assign_positional(fields, positional_keys, pieces)
    return fields


# -------------------------------------------------------------------------
# Category decoders
# -------------------------------------------------------------------------
def decode_system_details(data: str) -> Fields:
    """SD lines: ``[Action=APP.STARTUP]`` or ``[Action=STREAM.START|GTG=3000]``."""
    fields: Fields = {}
    for container in _split_containers(data):
        _merge_key_values(fields, _split_fields(container))
    return fields


def decode_connection_meta(data: str) -> Fields:
    """CD lines: ``[1|9|WLAN] [NI.Type=WFI] [NI.Name=...]``."""
    return _decode_connection_containers(data, CONNECTION_KEYS)


def decode_cell_network(data: str) -> Fields:
    """CN lines: ``[1|9|UMTS] [STATUS=NIS__CONNECTED|CTECH=LTE|RSSI=-65|...]``."""
    return _decode_connection_containers(data, CONNECTION_KEYS)


def decode_gps(data: str) -> Fields:
    """GP lines; the connection triple uses its own capitalized key names."""
    return _decode_connection_containers(data, GPS_CONNECTION_KEYS)


def _decode_wifi_network(container: str) -> Fields:
    # The BSSID list nests its own brackets, so split before stripping them.
    pieces = container.split("|")

    network: Fields = {}
    _assign_positional(network, WIFI_NETWORK_KEYS, [_strip_brackets(piece) for piece in pieces])

    bssid_pieces = pieces[4].split("=") if len(pieces) > 4 else []
    network["bssids_count"] = bssid_pieces[1] if len(bssid_pieces) > 1 else ""
    network["bssids"] = _strip_brackets(bssid_pieces[2]) if len(bssid_pieces) > 2 else ""
    return network


def decode_wifi_network(data: str) -> Fields:
    """
    WF lines: interface, connection status, then one container per scanned network.

    Container 2 is skipped. Every scanned network writes the same keys, so only
    the last network's details survive in the flat field mapping.
    """
    fields: Fields = {}
    containers = _split_containers(data)

    if len(containers) > 0:
        _assign_positional(fields, WIFI_INTERFACE_KEYS, _split_fields(containers[0]))
    if len(containers) > 1:
        _merge_key_values(fields, _split_fields(containers[1]))
    for container in containers[WIFI_FIRST_NETWORK_INDEX:]:
        fields.update(_decode_wifi_network(container))
    return fields


def decode_connection_tx(data: str) -> Fields:
    """CX lines: one container with 15 positional transmission statistics."""
    fields: Fields = {}
    for container in _split_containers(data):
        _assign_positional(fields, CONNECTION_TX_KEYS, _split_fields(container))
    return fields


def decode_encoder(data: str) -> Fields:
    """
    EN lines: 14 positional encoder statistics, then optional
    ``[LiveVideo=...]`` and ``[LiveAudio=...]`` containers.

    The transport format values contain ``|`` themselves, so the optional
    containers are read as one ``key=value`` pair each instead of being split.
    """
    fields: Fields = {}
    containers = _split_containers(data)

    if len(containers) > 0:
        _assign_positional(fields, ENCODER_KEYS, _split_fields(containers[0]))
    for container in containers[1:3]:
        pair = _split_key_value(_strip_brackets(container))
        if pair is not None:
            fields[pair[0]] = pair[1]
    return fields


DECODERS: Dict[Category, Decoder] = {
    Category.SYSTEM_DETAILS: decode_system_details,
    Category.CONNECTION_META: decode_connection_meta,
    Category.CELL_NETWORK: decode_cell_network,
    Category.WIFI_NETWORK: decode_wifi_network,
    Category.CONNECTION_TX: decode_connection_tx,
    Category.ENCODER: decode_encoder,
    Category.GPS: decode_gps,
}


def decode_fields(category: Category, data: str) -> Fields:
    """Decode ``data`` with the decoder registered for ``category``."""
    decoder = DECODERS.get(category)
    if decoder is None:
        return {}
    return decoder(data)
