# tests/conftest.py
from typing import List

import pytest

from gencad.parser import KeywordParam

EXAMPLE_LINES = [
    "$HEADER",
    "GENCAD 1.4",
    'USER "Mitron Europe Ltd. Serial Number 00001"',
    'DRAWING "Modem C100 motherboard 1234-5678"',
    'REVISION "Rev 566g 20th September 1990"',
    "UNITS USER 1200",
    "ORIGIN 0 0",
    "INTERTRACK 0",
    'ATTRIBUTE alpha m_part "BIS 9600"',
    'ATTRIBUTE alpha m_desc "Issue 2"',
    "$ENDHEADER",
    "$BOARD",
    "LINE 1000 2000 1200 2000",
    "ARC 1200 2000 1200 3000 1180 2500",
    "LINE 1200 3000 1000 3000",
    "LINE 1000 3000 1000 2000",
    "CUTOUT TRANSFORMER_HOLE",
    "CIRCLE 1180 2500 20",
    'ATTRIBUTE board mill "tool 255"',
    "MASK Fixture_1 TOP",
    "LINE 1005 2005 1195 2005",
    "ARC 1195 2005 1195 2995 1195 2500",
    "LINE 1195 2995 1005 2995",
    "LINE 1005 2995 1005 2005",
    "ARTWORK ORIGIN_MARKER TOP",
    "TRACK 10",
    "FILLED YES",
    "LINE -100 0 100 0",
    "LINE 0 -100 0 100",
    "$ENDBOARD",
    "$PADS",
    "PAD p0101 FINGER 32",
    "LINE 100 50 -100 50",
    "ARC -100 50 -100 -50 -100 0",
    "LINE -100 -50 100 -50",
    "ARC 100 -50 100 50 100 0",
    "PAD p1053 ROUND 20",
    "CIRCLE 0 0 30",
    "PAD p2034 BULLET 32",
    "ARC 0 -50 0 50 0 0",
    "LINE 0 50 -100 50",
    "LINE -100 50 -100 -50",
    "LINE -100 -50 0 -50",
    "PAD d_hole_50 ROUND 50",
    "CIRCLE 0 0 25",
    "PAD 3 RECTANGULAR 0",
    "RECTANGLE -5.2 -5.2 10.4 10.4",
    "$ENDPADS",
    "$PADSTACKS",
    "PADSTACK p_stack1 -1",
    "PAD p102_4 TOP 180 0",
    "PAD s102_4 BOTTOM 0 0",
    "PADSTACK p_stack2 -1",
    "PAD r_r3 TOP 180 MIRRORX",
    "PAD r_r0 INNER1 180 MIRRORX",
    "PAD r_r0 INNER2 180 MIRRORX",
    "PAD r_r3 BOTTOM 180 MIRRORY",
    "$ENDPADSTACKS",
    "$SHAPES",
    "SHAPE CAP_SUPPRESS_TYPE_____24",
    "LINE -1000 200 -1000 -200",
    "LINE -1000 -200 1000 -200",
    "ARC 1000 -200 1000 200 1000 0",
    "LINE 1000 200 -1000 200",
    "PIN 1 p102_4 -100 100 TOP 315 0",
    "PIN 1 s106_6 -100 100 BOTTOM 315 MIRRORX",
    "PIN 2 p102_4 100 -100 TOP 135 0",
    "PIN 2 s106_6 100 -100 BOTTOM 135 MIRRORX",
    "ARTWORK PIN1_MARKER 0 400 0 0",
    "FID PRIMARY OPTICAL1 0 0 TOP 0 0",
    "$ENDSHAPES",
    "$COMPONENTS",
    "COMPONENT D102",
    "DEVICE 1N4148",
    "PLACE 1200 1800",
    "LAYER TOP",
    "ROTATION 90",
    "SHAPE DO35_a MIRRORX 0",
    "ARTWORK ORIGIN_MARKER 0 0 0 MIRRORX 0",
    "TEXT 50 -50 100 90 0 TOP D102 42 -50 500 200",
    "SHEET 12_B3",
    "COMPONENT U7",
    "DEVICE 74LS04",
    "PLACE 0.003 9.52527",
    "LAYER BOTTOM",
    "ROTATION 12.25",
    "SHAPE DIL14 0 FLIP",
    "ARTWORK PIN1_MARKER 6500 2400 0 MIRRORX FLIP",
    "$ENDCOMPONENTS",
    "$DEVICES",
    "DEVICE 89-1N4148",
    "PART 1N4148",
    "TYPE DIODE",
    "PINDESC 1 anode",
    "PINDESC 2 cathode",
    'DESC "Diode 1N4148 bandoleer reverse voltage 100V"',
    "$ENDDEVICES",
    "$SIGNALS",
    "SIGNAL data_bus_7",
    "NODE IC3 2",
    "NODE R2 2",
    "NODE IC4 2",
    "NODE 6Ic2 p34A",
    "NAILLOC R2 2 -1 500 2500 -1 -1 100T BOTTOM",
    "NAILLOC 6Ic2 p34A -1 800 3000 -1 -1 75T BOTTOM",
    "SIGNAL ADDRESS_BUS_4",
    "NODE U1 2",
    "NODE PL12 132",
    "NAILLOC PL12 132 -1 200 200 -1 -1 100T BOTTOM",
    "$ENDSIGNALS",
    "$UNKNOWN",
    "KEYWORDA parameter1 parameter2 parameter3",
    "KEYWORDB parameter1 parameter2 parameter3",
    "$ENDUNKNOWN",
]


def _split_keyword_params(text: str) -> List[KeywordParam]:
    """
    Splits a block of 'KEYWORD parameter' lines into KeywordParam objects,
    numbering them from 1 like the tokenizer does.
    """
    result = []
    for number, line in enumerate(text.strip("\n").splitlines(), start=1):
        keyword, _, parameter = line.partition(" ")
        result.append(KeywordParam(keyword, parameter, line=number))
    return result


@pytest.fixture
def example_bytes() -> bytes:
    """The complete example document, CRLF terminated."""
    return ("\r\n".join(EXAMPLE_LINES) + "\r\n").encode("ascii")


@pytest.fixture
def example_file(tmp_path, example_bytes):
    path = tmp_path / "example.cad"
    path.write_bytes(example_bytes)
    return path


@pytest.fixture(scope="session")
def keyword_params():
    """Returns the helper that turns a text block into a keyword stream."""
    return _split_keyword_params


@pytest.fixture(scope="session")
def example_lines() -> List[str]:
    return list(EXAMPLE_LINES)
