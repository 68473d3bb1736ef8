from pydantic import BaseModel, ConfigDict

from domain.exceptions import InvalidPathError
from domain.value_objects.mime_type import MimeType

SEPARATOR = "/"
PARENT_SEGMENT = ".."


class ObjectReference(BaseModel):
    """Value object naming a stored object as ``<ownerId>/<opaqueName>.<extension>``.

    Built only through :meth:`parse`, which rejects parent-directory segments
    and absolute paths. This is a blocklist: the object store's own access
    policy still has to confine each owner to its prefix.
    """

    model_config = ConfigDict(frozen=True)

    path: str

    @classmethod
    def parse(cls, raw_path: str | None) -> "ObjectReference":
        """Validate a raw URL path segment and strip a single leading separator.

        Raises:
            InvalidPathError: If the path is empty, contains a ``..`` segment,
                or still starts with a separator after stripping one.

        """
        if not raw_path:
            msg = "File path is required."
            raise InvalidPathError(msg)

        path = raw_path.removeprefix(SEPARATOR)
        if not path or path.startswith(SEPARATOR):
            msg = "Invalid file path."
            raise InvalidPathError(msg)
        if PARENT_SEGMENT in path.split(SEPARATOR):
            msg = "Invalid file path."
            raise InvalidPathError(msg)

        return cls(path=path)

    @property
    def owner_id(self) -> str:
        return self.path.split(SEPARATOR, 1)[0]

    @property
    def filename(self) -> str:
        return self.path.rsplit(SEPARATOR, 1)[-1]

    @property
    def extension(self) -> str | None:
        name = self.filename
        if "." not in name:
            return None
        return name.rsplit(".", 1)[1]

    @property
    def content_type(self) -> MimeType:
        return MimeType.from_extension(self.extension)

    def __str__(self) -> str:
        return self.path
