"""HDF5 access for nexplore, backed by h5py."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

import h5py

from .errors import OpenError, ReadError
from .nodes import ROOT_ID, ChildEntry, Metadata, NodeKind, join_id

logger = logging.getLogger(__name__)

MAX_ATTRIBUTE_CHARS = 80

# h5py surfaces HDF5 library failures under several exception types.
H5_ERRORS = (KeyError, OSError, RuntimeError, TypeError, ValueError)


class Reader(Protocol):
    """What the rest of nexplore needs from a hierarchical file."""

    root_id: str
    file_name: str
    file_size: int
    root_key: int | None

    def children(self, node_id: str) -> list[ChildEntry]: ...

    def metadata(self, node_id: str) -> Metadata: ...

    def close(self) -> None: ...


def open_file(path: str | Path) -> "H5Reader":
    """Open an HDF5/NeXus file read-only."""
    path = Path(path)
    if not path.exists():
        raise OpenError(str(path), "no such file")
    if path.is_dir():
        raise OpenError(str(path), "is a directory")
    if not os.access(path, os.R_OK):
        raise OpenError(str(path), "permission denied")

    try:
        if not h5py.is_hdf5(path):
            raise OpenError(str(path), "not an HDF5 file")
        handle = h5py.File(path, "r")
    except OSError as e:
        raise OpenError(str(path), str(e)) from e

    logger.info("opened %s", path)
    return H5Reader(path, handle)


def object_key(obj) -> int:
    """Identity of an HDF5 object, the same for every hard link to it."""
    return hash(obj.id)


def format_attribute(value: object) -> str:
    """Render an attribute value as a short single line."""
    if isinstance(value, bytes):
        text = value.decode("utf-8", errors="replace")
    else:
        text = str(value)
    text = " ".join(text.split())
    if len(text) > MAX_ATTRIBUTE_CHARS:
        text = text[: MAX_ATTRIBUTE_CHARS - 1] + "…"
    return text


class H5Reader:
    """Reader over an open h5py file."""

    root_id = ROOT_ID

    def __init__(self, path: Path, handle: h5py.File) -> None:
        self.path = path
        self.file_name = path.name
        self._file = handle
        self.file_size = handle.id.get_filesize()
        self.root_key = object_key(handle["/"])

    def close(self) -> None:
        """Close the underlying file."""
        if self._file.id.valid:
            self._file.close()
            logger.info("closed %s", self.path)

    def children(self, node_id: str) -> list[ChildEntry]:
        """List the members of a group in the order h5py yields them."""
        group = self._resolve(node_id)
        if not isinstance(group, h5py.Group):
            raise ReadError(node_id, "not a group")

        try:
            names = list(group.keys())
        except H5_ERRORS as e:
            raise ReadError(node_id, str(e)) from e

        entries = []
        for name in names:
            kind = self._kind_of(group, name)
            key = self._group_key(group, name) if kind is NodeKind.GROUP else None
            entries.append(ChildEntry(name=name, id=join_id(node_id, name), kind=kind, object_key=key))
        return entries

    def metadata(self, node_id: str) -> Metadata:
        """Summarize a group or dataset without reading its data."""
        obj = self._resolve(node_id)
        attributes = self._attributes(node_id, obj)
        nx_class = attributes.get("NX_class")

        try:
            if isinstance(obj, h5py.Group):
                return Metadata(
                    kind=NodeKind.GROUP,
                    child_count=len(obj),
                    attributes=attributes,
                    nx_class=nx_class,
                )
            if isinstance(obj, h5py.Dataset):
                shape = tuple(obj.shape) if obj.shape is not None else None
                return Metadata(
                    kind=NodeKind.DATASET,
                    size=obj.nbytes,
                    dtype=str(obj.dtype),
                    shape=shape,
                    attributes=attributes,
                    nx_class=nx_class,
                )
        except H5_ERRORS as e:
            raise ReadError(node_id, str(e)) from e

        # Committed datatypes are leaves without data.
        return Metadata(
            kind=NodeKind.DATASET,
            dtype=str(getattr(obj, "dtype", "")) or None,
            attributes=attributes,
            nx_class=nx_class,
        )

    def _resolve(self, node_id: str):
        try:
            return self._file[node_id]
        except H5_ERRORS as e:
            raise ReadError(node_id, str(e)) from e

    def _kind_of(self, group: h5py.Group, name: str) -> NodeKind:
        try:
            cls = group.get(name, getclass=True)
        except H5_ERRORS:
            # Dangling soft or external link; its metadata read reports the error.
            logger.debug("cannot classify %s/%s", group.name, name)
            return NodeKind.DATASET
        if cls is h5py.Group:
            return NodeKind.GROUP
        return NodeKind.DATASET

    def _group_key(self, group: h5py.Group, name: str) -> int | None:
        try:
            return object_key(group[name])
        except H5_ERRORS:
            logger.debug("cannot identify %s/%s", group.name, name)
            return None

    def _attributes(self, node_id: str, obj) -> dict[str, str]:
        attributes: dict[str, str] = {}
        try:
            names = list(obj.attrs.keys())
        except H5_ERRORS as e:
            raise ReadError(node_id, str(e)) from e
        for name in names:
            try:
                attributes[name] = format_attribute(obj.attrs[name])
            except H5_ERRORS as e:
                attributes[name] = f"<unreadable: {e}>"
        return attributes
