"""
📦 OOXML Container Helper (ZIP + XML parts)
"""
import io
import logging
import re
import zipfile
from typing import List, Optional
from xml.sax.saxutils import unescape

from ..core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

_NUMERIC_ENTITIES_RE = re.compile(r"&#(x[0-9a-fA-F]+|\d+);")


def _numeric_entity(match: re.Match) -> str:
    value = match.group(1)
    try:
        code = int(value[1:], 16) if value.startswith("x") else int(value)
        return chr(code)
    except (ValueError, OverflowError):
        return match.group(0)


def decode_xml_text(text: str) -> str:
    """XML 텍스트 노드 엔티티 디코딩 (&amp; &lt; &gt; &quot; &apos; &#NN;)"""
    text = _NUMERIC_ENTITIES_RE.sub(_numeric_entity, text)
    return unescape(text, {"&quot;": '"', "&apos;": "'"})


class OOXMLPackage:
    """메모리 상의 OOXML(ZIP) 패키지 읽기 전용 래퍼"""

    def __init__(self, data: bytes):
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile as e:
            raise ExtractionError("Not a valid OOXML package", details={"error": str(e)}) from e

    def __enter__(self) -> "OOXMLPackage":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def names(self) -> List[str]:
        return self._zip.namelist()

    def has_part(self, name: str) -> bool:
        try:
            self._zip.getinfo(name)
            return True
        except KeyError:
            return False

    def read_part(self, name: str) -> Optional[str]:
        """파트를 UTF-8 문자열로 읽기 (없으면 None)"""
        if not self.has_part(name):
            return None
        return self._zip.read(name).decode("utf-8", errors="replace")

    def find_parts(self, pattern: str) -> List[str]:
        """정규식과 일치하는 파트 이름 (사전순 정렬)"""
        regex = re.compile(pattern)
        return sorted(name for name in self.names() if regex.search(name))
