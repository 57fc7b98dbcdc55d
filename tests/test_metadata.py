from script_engine.parsing import ExtractedMetadata, extract_metadata

from conftest import GARBLED_SCRIPT, SAMPLE_SCRIPT


def test_sample_script_metadata():
    metadata = extract_metadata(SAMPLE_SCRIPT)

    assert metadata.title == "Laser X"
    assert metadata.objective == "🟢 Criar Conexão"
    assert metadata.content_type == "Reels"


def test_garbled_metadata_resolves_to_canonical():
    metadata = extract_metadata(GARBLED_SCRIPT)

    assert metadata.objective == "🟢 Criar Conexão"
    assert metadata.content_type == "Reels"


def test_empty_input_gives_defaults():
    for raw in ("", "   ", "\n\n"):
        assert extract_metadata(raw) == ExtractedMetadata(title="Roteiro", objective="", content_type="")


def test_custom_default_title():
    assert extract_metadata("sem título", default_title="Sem título").title == "Sem título"


def test_title_variants():
    assert extract_metadata("Script: Botox Premium").title == "Botox Premium"
    assert extract_metadata("🎬 Roteiro: Bioestimulador").title == "Bioestimulador"
    assert extract_metadata("Roteiro para Reels sobre Ultrassom Microfocado").title == "Ultrassom Microfocado"
    assert extract_metadata("Roteiro sobre Laser X: versão curta").title == "Laser X"


def test_title_ignores_structure_legend():
    raw = "Roteiro com estrutura Disney: Identificação → Conflito\n\nTexto."
    assert extract_metadata(raw).title == "Roteiro"


def test_title_not_taken_from_prose():
    assert extract_metadata("Este roteiro sobre nada.").title == "Roteiro"


def test_objective_without_emoji():
    assert extract_metadata("Objetivo: Fazer Comprar").objective == "🔴 Fazer Comprar"


def test_objective_earliest_in_text_wins():
    raw = "✅ Fechar Agora\n🟡 Atrair Atenção"
    assert extract_metadata(raw).objective == "✅ Fechar Agora"


def test_content_type_english_label():
    assert extract_metadata("Content Type:   Carousel  \nmore").content_type == "Carousel"


def test_idempotent():
    assert extract_metadata(SAMPLE_SCRIPT) == extract_metadata(SAMPLE_SCRIPT)


def test_title_stops_at_colon():
    assert extract_metadata("Script for Laser X: intro").title == "for Laser X"
    assert extract_metadata("Roteiro sobre: Laser X").title == "Laser X"


def test_objective_phrase_without_emoji_before_emoji_phrase():
    raw = "Objetivo: Reativar Interesse\nDepois: 🟡 Atrair Atenção"
    assert extract_metadata(raw).objective == "🔁 Reativar Interesse"
