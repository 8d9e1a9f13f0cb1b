import fnmatch

# Binary assets that never go into a prompt.
NON_CODE_EXTENSIONS = {
    ".png", ".jpg", ".jpeg", ".gif", ".ico", ".webp", ".bmp", ".pdf",
    ".woff", ".woff2", ".ttf", ".eot", ".otf",
    ".mp4", ".mp3", ".wav",
    ".zip", ".tar", ".gz", ".7z", ".jar",
    ".exe", ".so",
    ".lock",  # yarn.lock, Pipfile.lock
}

# Lockfiles without a .lock suffix. Large, generated, never worth a prompt.
NON_CODE_FILENAMES = {"package-lock.json", "npm-shrinkwrap.json", "pnpm-lock.yaml"}


def is_code_file(file_name: str) -> bool:
    lowered = file_name.lower()
    if lowered.rsplit("/", 1)[-1] in NON_CODE_FILENAMES:
        return False
    return not any(lowered.endswith(ext) for ext in NON_CODE_EXTENSIONS)


def is_excluded(filename: str, patterns: list[str]) -> bool:
    """Return True if filename matches any exclude pattern.

    Supports full-path globs ("src/generated/*.py"), basename globs
    ("*.min.js") and directory names or prefixes ("migrations/", "dist").
    """
    for pattern in patterns:
        if fnmatch.fnmatch(filename, pattern):
            return True
        if fnmatch.fnmatch(filename.rsplit("/", 1)[-1], pattern):
            return True
        prefix = pattern.rstrip("/") + "/"
        if filename.startswith(prefix) or ("/" + prefix) in filename:
            return True
    return False
