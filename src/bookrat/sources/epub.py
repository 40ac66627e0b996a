"""EPUB package reader producing one raw part per spine item."""

from __future__ import annotations

import posixpath
import zipfile
import zlib
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional
from urllib.parse import unquote

from bookrat.document import PackageReadError, RawPart
from bookrat.runtime import telemetry

NAMESPACE = {
    "DAISY": "http://www.daisy.org/z3986/2005/ncx/",
    "OPF": "http://www.idpf.org/2007/opf",
    "CONT": "urn:oasis:names:tc:opendocument:xmlns:container",
    "XHTML": "http://www.w3.org/1999/xhtml",
    "EPUB": "http://www.idpf.org/2007/ops",
}
CONTAINER_PATH = "META-INF/container.xml"
NCX_MEDIA_TYPE = "application/x-dtbncx+xml"
EPUB_TYPE = f"{{{NAMESPACE['EPUB']}}}type"

# zipfile reports damaged or encrypted member data outside BadZipFile.
READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    RuntimeError,
    KeyError,
    ET.ParseError,
    OSError,
)


def extract_parts(path: str) -> List[RawPart]:
    """Return the spine of ``path`` as raw parts, titled from the TOC."""

    with telemetry.span(
        "epub::extract", component="sources", metadata={"path": path}
    ) as handle:
        try:
            with zipfile.ZipFile(path, "r") as archive:
                parts = _read_parts(archive)
        except READ_ERRORS as exc:
            handle.add_metadata("error", type(exc).__name__)
            raise PackageReadError(f"Cannot read {path}: {exc}", path=path) from exc
        handle.add_metadata("parts", len(parts))
    return parts


def _resolve(base_dir: str, href: str) -> str:
    href = unquote(href.split("#", 1)[0])
    return posixpath.normpath(posixpath.join(base_dir, href)) if base_dir else href


def _read_parts(archive: zipfile.ZipFile) -> List[RawPart]:
    container = ET.fromstring(archive.read(CONTAINER_PATH))
    rootfile = container.find("CONT:rootfiles/CONT:rootfile", NAMESPACE)
    if rootfile is None or not rootfile.get("full-path"):
        raise KeyError("container.xml names no rootfile")
    opf_path = rootfile.attrib["full-path"]
    root_dir = posixpath.dirname(opf_path)
    opf = ET.fromstring(archive.read(opf_path))

    manifest: Dict[str, ET.Element] = {}
    for item in opf.findall("OPF:manifest/OPF:item", NAMESPACE):
        item_id = item.get("id")
        if item_id and item.get("href"):
            manifest[item_id] = item

    contents: List[str] = []
    for itemref in opf.findall("OPF:spine/OPF:itemref", NAMESPACE):
        item = manifest.get(itemref.get("idref", ""))
        if item is None or item.get("media-type") == NCX_MEDIA_TYPE:
            continue
        contents.append(_resolve(root_dir, item.get("href", "")))

    titles = _toc_titles(archive, manifest, root_dir)
    return [
        RawPart(
            raw_markup=archive.read(content).decode("utf-8", errors="replace"),
            title=titles.get(content),
        )
        for content in contents
    ]


def _toc_titles(
    archive: zipfile.ZipFile, manifest: Dict[str, ET.Element], root_dir: str
) -> Dict[str, str]:
    nav_href: Optional[str] = None
    ncx_href: Optional[str] = None
    for item in manifest.values():
        if "nav" in (item.get("properties") or "").split():
            nav_href = _resolve(root_dir, item.get("href", ""))
        elif item.get("media-type") == NCX_MEDIA_TYPE:
            ncx_href = _resolve(root_dir, item.get("href", ""))

    try:
        if nav_href:
            return _nav_titles(ET.fromstring(archive.read(nav_href)), nav_href)
        if ncx_href:
            return _ncx_titles(ET.fromstring(archive.read(ncx_href)), ncx_href)
    except (KeyError, ET.ParseError) as exc:
        # Chapters still read fine without a table of contents.
        telemetry.record_event(
            "epub.toc_unreadable", level="warning", data={"reason": str(exc)}
        )
    return {}


def _remember(titles: Dict[str, str], target: str, label: Optional[str]) -> None:
    label = " ".join((label or "").split())
    if label and target not in titles:
        titles[target] = label


def _ncx_titles(toc: ET.Element, toc_path: str) -> Dict[str, str]:
    base = posixpath.dirname(toc_path)
    titles: Dict[str, str] = {}
    for nav_point in toc.findall("DAISY:navMap//DAISY:navPoint", NAMESPACE):
        content = nav_point.find("DAISY:content", NAMESPACE)
        label = nav_point.find("DAISY:navLabel/DAISY:text", NAMESPACE)
        if content is None or not content.get("src"):
            continue
        _remember(
            titles,
            _resolve(base, content.get("src", "")),
            label.text if label is not None else None,
        )
    return titles


def _nav_titles(toc: ET.Element, toc_path: str) -> Dict[str, str]:
    base = posixpath.dirname(toc_path)
    titles: Dict[str, str] = {}
    for nav in toc.iter(f"{{{NAMESPACE['XHTML']}}}nav"):
        if nav.get(EPUB_TYPE) != "toc":
            continue
        for anchor in nav.iter(f"{{{NAMESPACE['XHTML']}}}a"):
            if anchor.get("href"):
                _remember(titles, _resolve(base, anchor.get("href", "")), "".join(anchor.itertext()))
    return titles


__all__ = ["extract_parts"]
