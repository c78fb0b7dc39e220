"""
glTF 2.0 export and import.

A mesh is written as one buffer holding one tightly packed little-endian
block per attribute (plus one for indices), each block behind its own buffer
view and accessor. The document has one scene, one node and one mesh with a
single triangle primitive.

`.glb` paths get the binary container; anything else gets JSON with the
buffer embedded as a base64 data URI (or written next to it as `.bin`).
"""
from __future__ import annotations

import base64
import json
import logging
import os
import struct
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .errors import InvalidOperationError, MeshIOError
from .mesh import Mesh

logger = logging.getLogger(__name__)

GENERATOR = "meshkit"

# bufferView targets
ARRAY_BUFFER = 34962
ELEMENT_ARRAY_BUFFER = 34963

# accessor component types
BYTE = 5120
UNSIGNED_BYTE = 5121
SHORT = 5122
UNSIGNED_SHORT = 5123
UNSIGNED_INT = 5125
FLOAT = 5126

MODE_TRIANGLES = 4

_DTYPES: Dict[int, str] = {
    BYTE: "i1",
    UNSIGNED_BYTE: "u1",
    SHORT: "<i2",
    UNSIGNED_SHORT: "<u2",
    UNSIGNED_INT: "<u4",
    FLOAT: "<f4",
}

_NORMALIZE_DIVISORS: Dict[int, float] = {
    BYTE: 127.0,
    UNSIGNED_BYTE: 255.0,
    SHORT: 32767.0,
    UNSIGNED_SHORT: 65535.0,
}

_TYPE_SIZES: Dict[str, int] = {"SCALAR": 1, "VEC2": 2, "VEC3": 3, "VEC4": 4}

# glTF attribute name -> (Mesh field, accessor type)
_ATTRIBUTES: Tuple[Tuple[str, str, str], ...] = (
    ("NORMAL", "normals", "VEC3"),
    ("TEXCOORD_0", "uvs0", "VEC2"),
    ("TEXCOORD_1", "uvs1", "VEC2"),
    ("COLOR_0", "colors", "VEC4"),
)

_GLB_MAGIC = b"glTF"
_CHUNK_JSON = b"JSON"
_CHUNK_BIN = b"BIN\x00"
_DATA_URI_PREFIX = "data:application/octet-stream;base64,"


# -------------------------
# Writing
# -------------------------

@dataclass
class _GltfBuffers:
    bin: bytearray
    views: List[Dict[str, Any]]
    accessors: List[Dict[str, Any]]


def _pad4(n: int) -> int:
    return (n + 3) & ~3


def _add_buffer_view(buffers: _GltfBuffers, blob: bytes, target: int) -> int:
    offset = len(buffers.bin)
    buffers.bin.extend(blob)
    pad = _pad4(len(buffers.bin)) - len(buffers.bin)
    if pad:
        buffers.bin.extend(b"\x00" * pad)

    view_i = len(buffers.views)
    buffers.views.append({
        "buffer": 0,
        "byteOffset": offset,
        "byteLength": len(blob),
        "target": target,
    })
    return view_i


def _add_accessor(buffers: _GltfBuffers, view_index: int, component_type: int, count: int,
                  type_str: str, *, minv: Optional[List[float]] = None,
                  maxv: Optional[List[float]] = None) -> int:
    acc: Dict[str, Any] = {
        "bufferView": view_index,
        "componentType": component_type,
        "count": count,
        "type": type_str,
    }
    if minv is not None:
        acc["min"] = minv
    if maxv is not None:
        acc["max"] = maxv
    i = len(buffers.accessors)
    buffers.accessors.append(acc)
    return i


def _add_float_attribute(buffers: _GltfBuffers, values: list, type_str: str,
                         with_bounds: bool = False) -> int:
    arr = np.asarray(values, dtype="<f4").reshape(len(values), _TYPE_SIZES[type_str])
    view = _add_buffer_view(buffers, arr.tobytes(), ARRAY_BUFFER)
    minv = maxv = None
    if with_bounds:
        minv = arr.min(axis=0).tolist()
        maxv = arr.max(axis=0).tolist()
    return _add_accessor(buffers, view, FLOAT, len(values), type_str, minv=minv, maxv=maxv)


def _index_component_type(max_index: int) -> int:
    # the largest value of a component type is reserved (primitive restart)
    if max_index < 0xFFFF:
        return UNSIGNED_SHORT
    return UNSIGNED_INT


def build_gltf(mesh: Mesh) -> Tuple[Dict[str, Any], bytes]:
    """
    Build the glTF document and its binary buffer for `mesh`.

    The returned document has no `uri` on its buffer; the writers add one
    (or not, for GLB).
    """
    if mesh is None or not mesh.vertices:
        raise InvalidOperationError("Mesh has no vertices to export.")
    mesh.validate()

    buffers = _GltfBuffers(bin=bytearray(), views=[], accessors=[])
    attrs: Dict[str, int] = {
        "POSITION": _add_float_attribute(buffers, mesh.vertices, "VEC3", with_bounds=True),
    }
    for gltf_name, field_name, type_str in _ATTRIBUTES:
        values = getattr(mesh, field_name)
        if values:
            attrs[gltf_name] = _add_float_attribute(buffers, values, type_str)

    primitive: Dict[str, Any] = {"attributes": attrs, "mode": MODE_TRIANGLES}
    if mesh.triangles:
        idx_type = _index_component_type(max(mesh.triangles))
        idx_blob = np.asarray(mesh.triangles, dtype=_DTYPES[idx_type]).tobytes()
        idx_view = _add_buffer_view(buffers, idx_blob, ELEMENT_ARRAY_BUFFER)
        primitive["indices"] = _add_accessor(buffers, idx_view, idx_type, len(mesh.triangles), "SCALAR")

    doc: Dict[str, Any] = {
        "asset": {"version": "2.0", "generator": GENERATOR},
        "scene": 0,
        "scenes": [{"nodes": [0]}],
        "nodes": [{"mesh": 0, "name": mesh.name}],
        "meshes": [{"name": mesh.name, "primitives": [primitive]}],
        "buffers": [{"byteLength": len(buffers.bin)}],
        "bufferViews": buffers.views,
        "accessors": buffers.accessors,
    }
    return doc, bytes(buffers.bin)


def encode_gltf(mesh: Mesh) -> str:
    """JSON glTF with the buffer embedded as a base64 data URI."""
    doc, blob = build_gltf(mesh)
    doc["buffers"][0]["uri"] = _DATA_URI_PREFIX + base64.b64encode(blob).decode("ascii")
    return json.dumps(doc, ensure_ascii=False, separators=(",", ":"))


def encode_glb(mesh: Mesh) -> bytes:
    """Binary glTF container: 12-byte header, JSON chunk, BIN chunk."""
    doc, blob = build_gltf(mesh)

    json_bytes = json.dumps(doc, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    json_chunk = json_bytes + b" " * (_pad4(len(json_bytes)) - len(json_bytes))
    bin_chunk = blob + b"\x00" * (_pad4(len(blob)) - len(blob))

    total_len = 12 + 8 + len(json_chunk) + 8 + len(bin_chunk)
    return b"".join([
        _GLB_MAGIC,
        struct.pack("<I", 2),
        struct.pack("<I", total_len),
        struct.pack("<I", len(json_chunk)),
        _CHUNK_JSON,
        json_chunk,
        struct.pack("<I", len(bin_chunk)),
        _CHUNK_BIN,
        bin_chunk,
    ])


def _write(path: str, data, mode: str) -> None:
    try:
        if "b" in mode:
            with open(path, mode) as f:
                f.write(data)
        else:
            with open(path, mode, encoding="utf-8") as f:
                f.write(data)
    except OSError as exc:
        raise MeshIOError(f"failed to write {path}: {exc}") from exc


def save_glb(path: str, mesh: Mesh) -> None:
    """Save GLB (binary glTF 2.0) in one file."""
    data = encode_glb(mesh)
    _write(path, data, "wb")
    logger.info("wrote %s (%d vertices, %d triangles)", path, mesh.vertex_count, mesh.triangle_count)


def save_gltf(path: str, mesh: Mesh, *, embed_buffer: bool = True) -> None:
    """
    Save glTF 2.0; the extension picks the container.

    - `.glb` => binary container
    - embed_buffer=True => one .gltf file with base64 buffer
    - embed_buffer=False => writes sibling .bin
    """
    if path.lower().endswith(".glb"):
        save_glb(path, mesh)
        return

    if embed_buffer:
        text = encode_gltf(mesh)
    else:
        doc, blob = build_gltf(mesh)
        bin_path = os.path.splitext(path)[0] + ".bin"
        doc["buffers"][0]["uri"] = os.path.basename(bin_path)
        text = json.dumps(doc, ensure_ascii=False, indent=2)
        _write(path, text, "w")
        try:
            _write(bin_path, blob, "wb")
        except MeshIOError:
            # a .gltf without its buffer is unusable
            os.remove(path)
            raise
        logger.info("wrote %s and %s (%d vertices, %d triangles)",
                    path, bin_path, mesh.vertex_count, mesh.triangle_count)
        return
    _write(path, text, "w")
    logger.info("wrote %s (%d vertices, %d triangles)", path, mesh.vertex_count, mesh.triangle_count)


# -------------------------
# Reading
# -------------------------

def _parse_glb(data: bytes) -> Tuple[Dict[str, Any], Optional[bytes]]:
    magic, version, length = struct.unpack_from("<4sII", data, 0)
    if magic != _GLB_MAGIC:
        raise InvalidOperationError("not a GLB file (bad magic)")
    if version != 2:
        raise InvalidOperationError(f"unsupported GLB version {version}")
    if length > len(data):
        raise InvalidOperationError("GLB file is truncated")

    doc: Optional[Dict[str, Any]] = None
    bin_chunk: Optional[bytes] = None
    offset = 12
    while offset + 8 <= length:
        chunk_len, chunk_type = struct.unpack_from("<I4s", data, offset)
        body = data[offset + 8:offset + 8 + chunk_len]
        if chunk_type == _CHUNK_JSON:
            doc = json.loads(body.decode("utf-8"))
        elif chunk_type == _CHUNK_BIN and bin_chunk is None:
            bin_chunk = body
        offset += 8 + chunk_len
    if doc is None:
        raise InvalidOperationError("GLB file has no JSON chunk")
    return doc, bin_chunk


def _load_buffers(doc: Dict[str, Any], base_dir: str, glb_bin: Optional[bytes]) -> List[bytes]:
    out: List[bytes] = []
    for i, buf in enumerate(doc.get("buffers", [])):
        uri = buf.get("uri")
        if uri is None:
            if i != 0 or glb_bin is None:
                raise InvalidOperationError(f"buffer {i} has no data")
            out.append(glb_bin)
        elif uri.startswith("data:"):
            out.append(base64.b64decode(uri.split(",", 1)[1]))
        else:
            with open(os.path.join(base_dir, uri), "rb") as f:
                out.append(f.read())
    return out


def _read_accessor(doc: Dict[str, Any], buffers: List[bytes], index: int) -> np.ndarray:
    """Accessor contents as a (count, components) array, honouring byteStride."""
    acc = doc["accessors"][index]
    ctype = acc["componentType"]
    dtype = np.dtype(_DTYPES[ctype])
    ncomp = _TYPE_SIZES[acc["type"]]
    count = acc["count"]

    if "bufferView" not in acc or count == 0:
        arr = np.zeros((count, ncomp), dtype=dtype)
    else:
        view = doc["bufferViews"][acc["bufferView"]]
        data = buffers[view.get("buffer", 0)]
        start = view.get("byteOffset", 0) + acc.get("byteOffset", 0)
        elem_size = dtype.itemsize * ncomp
        stride = view.get("byteStride") or elem_size
        if start + stride * (count - 1) + elem_size > len(data):
            raise InvalidOperationError(f"accessor {index} reads past the end of its buffer")
        arr = np.ndarray(shape=(count, ncomp), dtype=dtype, buffer=data,
                         offset=start, strides=(stride, dtype.itemsize))

    if acc.get("normalized") and ctype in _NORMALIZE_DIVISORS:
        return np.maximum(arr.astype(np.float64) / _NORMALIZE_DIVISORS[ctype], -1.0)
    return arr


def _as_tuples(arr: np.ndarray) -> list:
    return [tuple(row) for row in arr.astype(np.float64).tolist()]


def _extract_mesh(doc: Dict[str, Any], buffers: List[bytes], mesh_index: int) -> Optional[Mesh]:
    gl_mesh = doc["meshes"][mesh_index]
    primitives = gl_mesh.get("primitives", [])
    if not primitives:
        return None
    prim = primitives[0]
    attrs = prim.get("attributes", {})

    mesh = Mesh(name=gl_mesh.get("name", "mesh"))
    if "POSITION" in attrs:
        mesh.vertices = _as_tuples(_read_accessor(doc, buffers, attrs["POSITION"]))
    for gltf_name, field_name, type_str in _ATTRIBUTES:
        if gltf_name in attrs:
            arr = _read_accessor(doc, buffers, attrs[gltf_name])
            if gltf_name == "COLOR_0" and arr.shape[1] == 3:
                # RGB colors get an opaque alpha
                arr = np.hstack([arr.astype(np.float64), np.ones((arr.shape[0], 1))])
            setattr(mesh, field_name, _as_tuples(arr))

    if "indices" in prim:
        mesh.triangles = [int(i) for i in _read_accessor(doc, buffers, prim["indices"]).ravel()]
    else:
        n = len(mesh.vertices)
        mesh.triangles = list(range(n - n % 3))
    return mesh


def _load_document(path: str) -> Tuple[Dict[str, Any], List[bytes]]:
    try:
        with open(path, "rb") as f:
            data = f.read()
        base_dir = os.path.dirname(os.path.abspath(path))
        if data[:4] == _GLB_MAGIC:
            doc, glb_bin = _parse_glb(data)
        else:
            doc, glb_bin = json.loads(data.decode("utf-8")), None
        return doc, _load_buffers(doc, base_dir, glb_bin)
    except OSError as exc:
        raise MeshIOError(f"failed to read {path}: {exc}") from exc
    except (ValueError, KeyError, IndexError, TypeError, struct.error) as exc:
        raise InvalidOperationError(f"failed to read glTF file {path}: {exc}") from exc


def load_gltf(path: str) -> Mesh:
    """Read the first primitive of the first mesh in a .gltf/.glb file."""
    doc, buffers = _load_document(path)
    try:
        mesh = None
        if doc.get("meshes"):
            mesh = _extract_mesh(doc, buffers, 0)
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise InvalidOperationError(f"failed to read glTF file {path}: {exc}") from exc
    if mesh is None:
        mesh = Mesh()
    logger.info("read %s (%d vertices, %d triangles)", path, mesh.vertex_count, mesh.triangle_count)
    return mesh


def load_all_gltf(path: str) -> List[Mesh]:
    """Read the first primitive of every mesh in a .gltf/.glb file."""
    doc, buffers = _load_document(path)
    meshes: List[Mesh] = []
    try:
        for i in range(len(doc.get("meshes", []))):
            mesh = _extract_mesh(doc, buffers, i)
            if mesh is not None:
                meshes.append(mesh)
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise InvalidOperationError(f"failed to read glTF file {path}: {exc}") from exc
    logger.info("read %d meshes from %s", len(meshes), path)
    return meshes
