"""
Scoped name generation.

Builds generators that turn a local class name and its stylesheet path into a
project-unique identifier from a pattern such as
``[path]___[name]__[local]___[hash:base64:5]``.

Supported placeholders:
    [local]    the local class name
    [name]     stylesheet file name without extension
    [ext]      stylesheet extension without the dot
    [path]     stylesheet directory relative to the context, with trailing slash
    [folder]   name of the stylesheet's directory
    [<hashType>:hash:<digest>:<length>] / [contenthash...]
               digest of the relative path and local name
"""

import hashlib
import os
import re
from collections.abc import Callable

from loguru import logger

from stylescope.errors import StyleScopeError

ScopedNameGenerator = Callable[[str, str, str], str]

DEFAULT_SCOPED_NAME_PATTERN = "[path]___[name]__[local]___[hash:base64:5]"

# md4 is missing from OpenSSL 3 builds
DEFAULT_HASH_TYPE = "md5"

HASH_PLACEHOLDER_RE = re.compile(
    r"\[(?:([^:\]]+):)?(?:hash|contenthash)(?::([a-z]+\d*))?(?::(\d+))?\]",
    re.IGNORECASE,
)
INVALID_NAME_CHARS_RE = re.compile(r"[^a-zA-Z0-9\-_\u00A0-\uFFFF]")
LEADING_DIGIT_RE = re.compile(r"^((-?[0-9])|--)")

BASE_ENCODE_TABLES = {
    26: "abcdefghijklmnopqrstuvwxyz",
    32: "123456789abcdefghjkmnpqrstuvwxyz",
    36: "0123456789abcdefghijklmnopqrstuvwxyz",
    49: "abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ",
    52: "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ",
    58: "123456789abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ",
    62: "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ",
    64: "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ-_",
}


def encode_buffer_to_base(buffer: bytes, base: int) -> str:
    """Encode bytes, read as a little-endian integer, with a base-N alphabet."""
    table = BASE_ENCODE_TABLES[base]
    number = int.from_bytes(buffer, "little")
    output = ""
    while number > 0:
        number, remainder = divmod(number, base)
        output = table[remainder] + output
    return output


def get_hash_digest(
    content: bytes,
    hash_type: str | None = None,
    digest_type: str | None = None,
    max_length: int | None = None,
) -> str:
    """Hash content and render the digest.

    Args:
        content: Bytes to hash
        hash_type: hashlib algorithm name (default: md5)
        digest_type: ``hex`` or ``base26`` to ``base64`` (default: hex)
        max_length: Truncate the digest to this many characters

    Returns:
        Rendered digest

    Raises:
        StyleScopeError: If the hash or digest type is not supported
    """
    try:
        digest = hashlib.new(hash_type or DEFAULT_HASH_TYPE, content)
    except ValueError as e:
        raise StyleScopeError(f"Unsupported hash type: {hash_type}") from e
    digest_type = (digest_type or "hex").lower()

    if digest_type == "hex":
        rendered = digest.hexdigest()
    elif digest_type.startswith("base") and digest_type[4:].isdigit() \
            and int(digest_type[4:]) in BASE_ENCODE_TABLES:
        rendered = encode_buffer_to_base(digest.digest(), int(digest_type[4:]))
    else:
        raise StyleScopeError(f"Unsupported digest type: {digest_type}")

    return rendered[:max_length] if max_length else rendered


def interpolate_name(
    resource_path: str,
    pattern: str,
    content: str | None = None,
    context: str | None = None,
) -> str:
    """Fill a naming pattern from a resource path.

    Args:
        resource_path: Path of the stylesheet
        pattern: Pattern with placeholders
        content: Content hashed for ``[hash]`` placeholders
        context: Directory ``[path]`` is made relative to

    Returns:
        Interpolated name
    """
    ext = "bin"
    basename = "file"
    directory = ""
    folder = ""

    if resource_path:
        parent, filename = os.path.split(resource_path)
        stem, suffix = os.path.splitext(filename)
        if suffix:
            ext = suffix[1:]
        resource_dir = resource_path
        if parent:
            basename = stem
            resource_dir = parent + os.sep

        if context is not None:
            directory = os.path.relpath(resource_dir + "_", context).replace("\\", "/")
            directory = re.sub(r"\.\.(/)?", r"_\1", directory)[:-1]
        else:
            directory = re.sub(r"\.\.(/)?", r"_\1", resource_dir.replace("\\", "/"))

        if len(directory) == 1:
            directory = ""
        elif len(directory) > 1:
            folder = os.path.basename(directory.rstrip("/"))

    name = pattern
    if content is not None:
        encoded = content.encode("utf-8")
        name = HASH_PLACEHOLDER_RE.sub(
            lambda m: get_hash_digest(
                encoded, m.group(1), m.group(2), int(m.group(3)) if m.group(3) else None
            ),
            name,
        )

    name = re.sub(r"\[ext\]", lambda _: ext, name, flags=re.IGNORECASE)
    name = re.sub(r"\[name\]", lambda _: basename, name, flags=re.IGNORECASE)
    name = re.sub(r"\[path\]", lambda _: directory, name, flags=re.IGNORECASE)
    name = re.sub(r"\[folder\]", lambda _: folder, name, flags=re.IGNORECASE)
    return name


def create_name_generator(
    pattern: str = DEFAULT_SCOPED_NAME_PATTERN,
    context: str | None = None,
    hash_prefix: str = "",
) -> ScopedNameGenerator:
    """Create a scoped name generator from a pattern.

    Names are deterministic for a given project: the hash covers the
    stylesheet path relative to ``context`` and the local name.

    Args:
        pattern: Naming pattern
        context: Project directory (default: current working directory)
        hash_prefix: Extra text mixed into the hash

    Returns:
        Function of (local name, stylesheet path, css) returning the scoped name
    """
    context = context or os.getcwd()

    def generate(local_name: str, file_path: str, css: str = "") -> str:
        del css  # unused
        name = re.sub(r"\[local\]", lambda _: local_name, pattern, flags=re.IGNORECASE)
        relative_path = os.path.relpath(file_path, context).replace("\\", "/")
        content = f"{hash_prefix}{relative_path}\x00{local_name}"
        generic_name = interpolate_name(file_path, name, content=content, context=context)
        generic_name = INVALID_NAME_CHARS_RE.sub("-", generic_name)
        return LEADING_DIGIT_RE.sub(r"_\1", generic_name)

    logger.debug(f"Created scoped name generator: pattern={pattern!r}, context={context!r}")
    return generate


def get_scoped_name_generator(
    generate_scoped_name: ScopedNameGenerator | str | None,
    context: str | None = None,
) -> ScopedNameGenerator:
    """Return the user's generator, or build one from a pattern.

    Args:
        generate_scoped_name: Callable used as is, or a naming pattern
        context: Project directory used by pattern-based generators

    Returns:
        Scoped name generator
    """
    if callable(generate_scoped_name):
        return generate_scoped_name
    return create_name_generator(generate_scoped_name or DEFAULT_SCOPED_NAME_PATTERN, context)
