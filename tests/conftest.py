import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SCHEMAS_DIR = TESTS_ROOT / "schemas"

# Make the repository importable as 'errfmt' without installing it
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


SOME_ERROR = '''\
#[derive(Debug)]
pub enum SomeError {
    #[error("hello unit")]
    Unit,
    #[error("hello {0:?} {1}")]
    Unnamed(UnnamedStructValue, i32),
    #[error("hello {message}")]
    Named { message: String },
}
'''


@pytest.fixture
def some_error_source() -> str:
    return SOME_ERROR


@pytest.fixture
def write_schema(tmp_path):
    """Write schema text to tmp_path and return its path."""
    def _write(text: str, name: str = "errors.errfmt") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
