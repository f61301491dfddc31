"""SparkFun SerLCD command encoding, serial transport and command line."""

from .display import SerLCD
from .protocol import (
    BacklightRange,
    CharacterEncodingError,
    CommandPrefix,
    DisplayGeometry,
    DisplayProtocolEncoder,
    LineAddressRange,
    REFERENCE_GEOMETRY,
    emit,
)
from .transport import HexDumpSink, SerialSink
