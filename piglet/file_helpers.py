from pathlib import Path
import gzip
import hashlib


def content_address(data: bytes) -> str:
    """The one hash used for object ids and content equality checks."""
    return hashlib.sha256(data).hexdigest()

def get_file_hash(filepath: Path) -> str:
    return content_address(filepath.read_bytes())

def write_compressed(dest_path: Path, content: bytes) -> None:
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    with gzip.open(dest_path, "wb") as f_out:
        f_out.write(content)

def read_compressed(path: Path) -> bytes:
    with gzip.open(path, "rb") as f:
        return f.read()

def read_file(root: Path, name: str) -> bytes:
    return (root / name).read_bytes()

def write_file(root: Path, name: str, content: bytes) -> None:
    dest_path = root / name
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    dest_path.write_bytes(content)

def delete_file(root: Path, name: str) -> None:
    path = root / name
    path.unlink(missing_ok=True)
    # prune directories left empty, never the root itself
    parent = path.parent
    while parent != root and parent.is_dir() and not any(parent.iterdir()):
        parent.rmdir()
        parent = parent.parent

def list_files(root: Path, ignore: set[str] | None = None) -> set[str]:
    """Every plain file under root as a posix path relative to it."""
    files = set()
    if not root.is_dir():
        return files
    for item in root.iterdir():
        if ignore and item.name in ignore:
            continue
        if item.is_dir():
            files.update(f"{item.name}/{name}" for name in list_files(item))
        elif item.is_file():
            files.add(item.name)
    return files
