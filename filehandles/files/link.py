import os
from typing import Any, ClassVar, Optional, Set

from filehandles.core.config import settings
from filehandles.core.exceptions import BrokenLinkError, SymlinkLoopError
from filehandles.core.types import FileType
from filehandles.files.file import File, UserOrGroup, resolve_gid, resolve_uid
from filehandles.handles.base import Handle


class Link(File):
    """Symbolic link. Ownership changes apply to the link itself unless the
    ``*_target`` variant is used."""

    FILE_TYPE: ClassVar[FileType] = FileType.LINK

    def chgrp(self, group: UserOrGroup) -> bool:
        return self._attempt(
            "chgrp", "changing_link_group",
            lambda: os.chown(self.path.path, -1, resolve_gid(group), follow_symlinks=False),
            group=group,
        )

    def chgrp_target(self, group: UserOrGroup) -> bool:
        return super().chgrp(group)

    def chown(self, user: UserOrGroup) -> bool:
        return self._attempt(
            "chown", "changing_link_owner",
            lambda: os.chown(self.path.path, resolve_uid(user), -1, follow_symlinks=False),
            user=user,
        )

    def chown_target(self, user: UserOrGroup) -> bool:
        return super().chown(user)

    def _target_path(self) -> Optional[str]:
        try:
            target = os.readlink(self.path.path)
        except OSError as e:
            self._warning("reading_link_failed", "readlink", path=self.path.path, error=str(e))
            return None

        # Relative targets are relative to the directory holding the link
        if not os.path.isabs(target):
            target = os.path.join(self.path.dirname, target)
        return target

    def readlink(self) -> Optional[File]:
        """Wrapper for the file this link points at, one level deep.

        None when this is not a link, it cannot be read, or its target does
        not exist.
        """
        self._info("reading_link", "readlink", path=self.path.path)

        target = self._target_path()
        if target is None or FileType.of(target) is None:
            self._debug("link_unresolved", "readlink", path=self.path.path, target=target)
            return None

        resolved = File.make(target)
        resolved.set_logger(self._logger)

        self._debug("link_read", "readlink", path=self.path.path, target=target,
                    target_type=type(resolved).__name__)
        return resolved

    @property
    def target(self) -> Optional[File]:
        return self.readlink()

    def readlink_recursively(self, max_depth: Optional[int] = None) -> Optional[File]:
        """Follow links until a non-link file or a broken link (None).

        Raises SymlinkLoopError when a link is revisited or more than
        ``max_depth`` links are followed.
        """
        max_depth = max_depth or settings.max_link_depth
        visited: Set[str] = {os.path.abspath(self.path.path)}

        target = self.readlink()
        while isinstance(target, Link):
            key = os.path.abspath(target.path.path)
            if key in visited or len(visited) >= max_depth:
                self._warning("link_loop_detected", "readlink_recursively",
                              path=self.path.path, depth=len(visited))
                raise SymlinkLoopError(self.path.path, details={"depth": len(visited)})
            visited.add(key)
            target = target.readlink()

        return target

    @property
    def final_target(self) -> Optional[File]:
        return self.readlink_recursively()

    def open(self, *args: Any, **kwargs: Any) -> Handle:
        """Open the link target with the target's own ``open`` arguments."""
        target = self.readlink()
        if target is None:
            raise BrokenLinkError(self.path.path)
        return target.open(*args, **kwargs)
