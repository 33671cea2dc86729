"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project directory to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest

from config import DATA_DIR
from services.mapping_service import MappingTable, load_mapping_file
from services.translation_service import TranslationService
from services.dropdown_service import PatternDropdownEngine
from services.vocabulary_service import VocabularyRegistry, load_vocabularies


# ===================
# SAMPLE CODE
# ===================

@pytest.fixture
def sample_en() -> str:
    """English sample script."""
    return """when @greenFlag clicked
move (10) steps
say [Hello!] for (2) secs
go to [random position v]
if <touching [mouse-pointer v]?> then
  set rotation style [left-right v]
end
switch costume to [costume1 v]"""


@pytest.fixture
def sample_ja() -> str:
    """sample_en translated with the shipped data."""
    return """@greenFlag が押されたとき
(10) 歩動かす
[Hello!] と (2) 秒言う
[ランダムな位置 v] へ行く
もし <[マウスのポインター v] に触れた> なら
  回転方法を [左右のみ v] にする
end
コスチュームを [コスチューム1 v] にする"""


# ===================
# LANGUAGE DATA
# ===================

@pytest.fixture(scope="session")
def registry() -> VocabularyRegistry:
    """Vocabularies shipped in data/locales."""
    return load_vocabularies(DATA_DIR / "locales")


@pytest.fixture(scope="session")
def mapping_table() -> MappingTable:
    """Dropdown mapping shipped in data/dropdown_map.json."""
    return load_mapping_file(DATA_DIR / "dropdown_map.json")


@pytest.fixture
def small_registry() -> VocabularyRegistry:
    """
    Registry whose Japanese table only knows a few blocks.

    Blocks it does not know keep their English text, which isolates
    dropdown substitution in end-to-end tests.
    """
    return VocabularyRegistry.from_tables({
        "ja": {
            "commands": {
                "move %1 steps": "%1 歩動かす",
                "touching %1?": "%1 に触れた",
                "letter %1 of %2": "%2 の %1 番目の文字",
            }
        }
    })


# ===================
# SERVICES
# ===================

@pytest.fixture
def translation_service(registry, mapping_table) -> TranslationService:
    """Service with the shipped data and the tree engine."""
    return TranslationService(registry, mapping_table)


@pytest.fixture
def pattern_translation_service(registry, mapping_table) -> TranslationService:
    """Service with the shipped data and the pattern engine."""
    return TranslationService(registry, mapping_table, PatternDropdownEngine())


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client (runs the startup lifespan).

    Usage:
        def test_endpoint(test_client):
            response = test_client.post("/translate", json={...})
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as client:
        yield client
