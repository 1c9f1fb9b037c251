"""Binary snapshot format and atomic file persistence for classifiers.

A snapshot file is the 4-byte magic ``b"TXBY"`` followed by a pickled plain
dictionary::

    {"version": 1, "categories": {name: {"tokens": {token: count}, "tally": n}}}

Only builtin containers and scalars are ever written, and decoding refuses
every pickle global, so loading a file cannot construct arbitrary objects.
Every decoded snapshot is validated in full before it replaces a model;
a rejected snapshot leaves the target classifier untouched.

Files are written through a temporary file in the destination directory
that is flushed, synced, closed, and then renamed over the target, so the
destination is never observed half-written.
"""

from __future__ import annotations

import contextlib
import io
import os
import pickle
import tempfile
from typing import TYPE_CHECKING, BinaryIO, Optional

from .config import resolve_model_path
from .errors import (
    DecodeError,
    EncodeError,
    ModelFileError,
    NilSinkError,
    NilSourceError,
    PathNotAbsoluteError,
)
from .models import ModelState
from .validation import state_from_dict

if TYPE_CHECKING:
    from .classifier import Classifier

MAGIC = b"TXBY"
PICKLE_PROTOCOL = 4
TEMP_PREFIX = ".textbayes-"


class _SnapshotUnpickler(pickle.Unpickler):
    """Unpickler that only materialises builtin containers and scalars."""

    def find_class(self, module: str, name: str):
        raise pickle.UnpicklingError(f"global {module}.{name} is not allowed in a snapshot")


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def encode_state(state: ModelState) -> bytes:
    """Serialize *state* to snapshot bytes.

    Raises:
        EncodeError: If the state cannot be pickled.
    """
    try:
        return MAGIC + pickle.dumps(state.to_dict(), protocol=PICKLE_PROTOCOL)
    except (pickle.PicklingError, TypeError, AttributeError) as exc:
        raise EncodeError(f"encode model: {exc}") from exc


def decode_state(data: bytes) -> ModelState:
    """Parse snapshot bytes into an unvalidated :class:`ModelState`.

    Raises:
        DecodeError: If the bytes are not a snapshot or the payload is
            not shaped like one.
    """
    if not data.startswith(MAGIC):
        raise DecodeError("decode model: missing snapshot header")

    try:
        payload = _SnapshotUnpickler(io.BytesIO(data[len(MAGIC):])).load()
    except Exception as exc:
        raise DecodeError(f"decode model: {exc}") from exc

    return state_from_dict(payload)


# ---------------------------------------------------------------------------
# Stream persistence
# ---------------------------------------------------------------------------


def save(classifier: "Classifier", sink: Optional[BinaryIO]) -> None:
    """Write a snapshot of *classifier* to a binary stream.

    The snapshot is copied under the classifier's read lock and encoded
    after the lock is released.

    Raises:
        NilSinkError: If *sink* is None.
        EncodeError: If encoding or writing fails.
    """
    if sink is None:
        raise NilSinkError()

    data = encode_state(classifier.export_state())
    try:
        sink.write(data)
    except (OSError, ValueError) as exc:
        raise EncodeError(f"write model: {exc}") from exc


def load(classifier: "Classifier", source: Optional[BinaryIO]) -> None:
    """Replace *classifier*'s model with a snapshot read from a stream.

    Raises:
        NilSourceError: If *source* is None.
        DecodeError: If the stream cannot be read or decoded.
        ValidationError: If the snapshot violates a model invariant.
    """
    if source is None:
        raise NilSourceError()

    try:
        data = source.read()
    except (OSError, ValueError) as exc:
        raise DecodeError(f"read model: {exc}") from exc
    if not isinstance(data, (bytes, bytearray)):
        raise DecodeError("read model: source must be opened in binary mode")

    classifier.replace_state(decode_state(bytes(data)))


# ---------------------------------------------------------------------------
# File persistence
# ---------------------------------------------------------------------------


def _absolute_model_path(path: str) -> str:
    resolved = resolve_model_path(path)
    if not os.path.isabs(resolved):
        raise PathNotAbsoluteError(resolved)
    return resolved


def _remove_temp(temp_path: str) -> None:
    with contextlib.suppress(OSError):
        os.remove(temp_path)


def save_to_file(classifier: "Classifier", path: str = "") -> None:
    """Atomically write a snapshot of *classifier* to *path*.

    An empty *path* resolves to the configured default model location.
    On any failure the temporary file is removed and an existing file at
    *path* is left as it was.

    Raises:
        PathNotAbsoluteError: If *path* is relative.
        EncodeError: If the snapshot cannot be encoded.
        ModelFileError: If creating, writing, syncing, closing or renaming
            the temporary file fails.
    """
    path = _absolute_model_path(path)
    directory = os.path.dirname(path)
    data = encode_state(classifier.export_state())

    try:
        fd, temp_path = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=directory)
    except OSError as exc:
        raise ModelFileError("create", directory, exc) from exc

    try:
        handle = os.fdopen(fd, "wb")
        try:
            try:
                handle.write(data)
            except OSError as exc:
                raise ModelFileError("write", temp_path, exc) from exc
            try:
                handle.flush()
                os.fsync(handle.fileno())
            except OSError as exc:
                raise ModelFileError("sync", temp_path, exc) from exc
        except BaseException:
            handle.close()
            raise

        try:
            handle.close()
        except OSError as exc:
            raise ModelFileError("close", temp_path, exc) from exc

        try:
            os.replace(temp_path, path)
        except OSError as exc:
            raise ModelFileError("rename", path, exc) from exc
    except BaseException:
        _remove_temp(temp_path)
        raise


def load_from_file(classifier: "Classifier", path: str = "") -> None:
    """Replace *classifier*'s model with the snapshot stored at *path*.

    Raises:
        PathNotAbsoluteError: If *path* is relative.
        ModelFileError: If the file cannot be opened.
        DecodeError: If the file is not a snapshot.
        ValidationError: If the snapshot violates a model invariant.
    """
    path = _absolute_model_path(path)

    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise ModelFileError("open", path, exc) from exc

    with handle:
        load(classifier, handle)
