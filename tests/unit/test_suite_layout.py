from collections import Counter
from pathlib import Path

TESTS_ROOT = Path(__file__).resolve().parents[1]


class TestModuleNames:
    def test_module_basenames_are_unique(self) -> None:
        """Test directories are not packages, so two modules with one name break collection."""
        names = Counter(path.name for path in TESTS_ROOT.rglob("test_*.py"))

        assert [name for name, count in names.items() if count > 1] == []
