import html
import re
from dataclasses import dataclass
from typing import Optional

from .srv import SRVRecord

FORMATTING_CODE = re.compile(r'§(.)', re.S)

COLORS = {
    '0': '#000000', '1': '#0000AA', '2': '#00AA00', '3': '#00AAAA',
    '4': '#AA0000', '5': '#AA00AA', '6': '#FFAA00', '7': '#AAAAAA',
    '8': '#555555', '9': '#5555FF', 'a': '#55FF55', 'b': '#55FFFF',
    'c': '#FF5555', 'd': '#FF55FF', 'e': '#FFFF55', 'f': '#FFFFFF',
}

STYLES = {
    'l': 'font-weight: bold;',
    'm': 'text-decoration: line-through;',
    'n': 'text-decoration: underline;',
    'o': 'font-style: italic;',
}


@dataclass(frozen=True)
class Version:
    name: str
    protocol: int


@dataclass(frozen=True)
class Players:
    online: int
    max: int


@dataclass(frozen=True)
class Motd:
    raw: str
    clean: str
    html: str


@dataclass(frozen=True)
class StatusResponse:
    host: str
    port: int
    srv_record: Optional[SRVRecord]
    version: Version
    players: Players
    motd: Motd


def clean_motd(raw):
    return FORMATTING_CODE.sub('', raw)


def motd_to_html(raw):
    '''Render a MOTD with section-sign formatting codes as HTML spans.
    A colour code clears any active styles, as it does in the client.'''
    parts = FORMATTING_CODE.split(raw)
    color = None
    styles = []
    out = []

    for i, part in enumerate(parts):
        if i % 2:
            code = part.lower()
            if code in COLORS:
                color = COLORS[code]
                styles = []
            elif code in STYLES:
                if STYLES[code] not in styles:
                    styles.append(STYLES[code])
            elif code == 'r':
                color = None
                styles = []
            continue

        if not part:
            continue

        css = ([] if color is None else ['color: %s;' % color]) + styles
        text = html.escape(part)
        if css:
            out.append('<span style="%s">%s</span>' % (' '.join(css), text))
        else:
            out.append(text)

    return ''.join(out)


def format_result(host, port, srv_record, protocol_version, server_version,
                  motd, player_count, max_players):
    return StatusResponse(
        host=host,
        port=port,
        srv_record=srv_record,
        version=Version(name=server_version, protocol=protocol_version),
        players=Players(online=player_count, max=max_players),
        motd=Motd(raw=motd, clean=clean_motd(motd), html=motd_to_html(motd)),
    )
