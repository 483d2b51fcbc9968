# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Coarse file-type classification by extension."""

import logging
from typing import Literal

logger = logging.getLogger(__name__)

FileType = Literal[
    "SOURCE",
    "BINARY",
    "ARCHIVE",
    "TEXT",
    "DOCUMENTATION",
    "IMAGE",
    "AUDIO",
    "VIDEO",
    "SPDX",
    "APPLICATION",
    "OTHER",
]

_EXTENSIONS_BY_TYPE: dict[FileType, tuple[str, ...]] = {
    "SOURCE": (
        "ADA", "ASM", "BAS", "BASH", "BAT", "C", "C++", "CC", "CGI", "CLJ", "CMAKE",
        "CMD", "COFFEE", "CPP", "CS", "CSH", "CSS", "CXX", "D", "DART", "EL", "ERL",
        "EX", "EXS", "F", "F90", "FOR", "FS", "GO", "GRADLE", "GROOVY", "H", "H++",
        "HH", "HPP", "HRL", "HS", "HTM", "HTML", "HXX", "INC", "JAVA", "JL", "JS",
        "JSP", "JSX", "KT", "KTS", "LISP", "LUA", "M", "MAK", "MJS", "ML", "MM",
        "PAS", "PHP", "PL", "PM", "PROPERTIES", "PS1", "PY", "PYX", "R", "RB", "RS",
        "S", "SASS", "SCALA", "SCM", "SCSS", "SH", "SQL", "SWIFT", "TCL", "TS",
        "TSX", "VB", "VBS", "VUE", "XSL", "XSLT", "ZSH",
    ),
    "BINARY": (
        "A", "BIN", "CLASS", "DLL", "DYLIB", "EXE", "JNILIB", "KO", "LIB", "O",
        "OBJ", "PYC", "PYD", "PYO", "SO", "WASM",
    ),
    "ARCHIVE": (
        "7Z", "AAR", "APK", "BZ2", "CAB", "DEB", "EAR", "GZ", "JAR", "NPM", "RAR",
        "RPM", "TAR", "TBZ2", "TGZ", "TXZ", "WAR", "WHL", "XZ", "ZIP", "ZST",
    ),
    "TEXT": ("CSV", "LOG", "TSV", "TXT"),
    "DOCUMENTATION": ("ADOC", "DOC", "DOCX", "MD", "MDOWN", "ODT", "PDF", "RST", "RTF"),
    "IMAGE": ("BMP", "GIF", "ICO", "JPEG", "JPG", "PNG", "PSD", "SVG", "TIF", "TIFF", "WEBP"),
    "AUDIO": ("AAC", "FLAC", "M4A", "MID", "MP3", "OGG", "WAV", "WMA"),
    "VIDEO": ("AVI", "FLV", "M4V", "MKV", "MOV", "MP4", "MPEG", "MPG", "WEBM", "WMV"),
    "SPDX": ("RDF", "SPDX"),
    "APPLICATION": ("APP", "DMG", "IPA", "MSI"),
}


def _build_extension_index() -> dict[str, FileType]:
    index: dict[str, FileType] = {}
    for file_type, extensions in _EXTENSIONS_BY_TYPE.items():
        for extension in extensions:
            if extension in index:
                logger.warning(f"Duplicate file extension mapping (extension={extension})")
            index[extension] = file_type
    return index


EXTENSION_TO_FILE_TYPE: dict[str, FileType] = _build_extension_index()


def classify(extension: str) -> FileType:
    """Map a file extension to a file type; unknown extensions are ``OTHER``."""
    return EXTENSION_TO_FILE_TYPE.get(extension.strip().upper(), "OTHER")
