"""Read-only snapshot of stat(), lstat() or fstat() results."""
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Stat:
    """Stat information captured once; never refreshed."""
    device: int
    inode: int
    mode: int
    link_count: int
    uid: int
    gid: int
    device_type: int
    size: int
    atime: int
    ctime: int
    mtime: int
    block_size: int
    block_count: int

    @classmethod
    def from_result(cls, result: os.stat_result) -> "Stat":
        return cls(
            device=result.st_dev,
            inode=result.st_ino,
            mode=result.st_mode,
            link_count=result.st_nlink,
            uid=result.st_uid,
            gid=result.st_gid,
            device_type=getattr(result, "st_rdev", 0),
            size=result.st_size,
            atime=int(result.st_atime),
            ctime=int(result.st_ctime),
            mtime=int(result.st_mtime),
            block_size=getattr(result, "st_blksize", 0),
            block_count=getattr(result, "st_blocks", 0),
        )

    @classmethod
    def of_path(cls, path: Union[str, "os.PathLike[str]"], follow_symlinks: bool = True) -> "Stat":
        return cls.from_result(os.stat(path, follow_symlinks=follow_symlinks))

    @classmethod
    def of_descriptor(cls, fd: int) -> "Stat":
        return cls.from_result(os.fstat(fd))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
