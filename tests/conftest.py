"""Shared sample scripts and fixtures."""

import pytest

from script_engine.parsing import parse_script
from script_engine.scoring import ValidationResult


SAMPLE_SCRIPT = """Roteiro sobre Laser X

🎥 Tipo de Conteúdo: Reels
🎯 Objetivo: 🟢 Criar Conexão
✍️ Tom de linguagem: Acolhedor
✅ Ideal para: Clínicas de estética
Texto solto que não é metadado

Roteiro com estrutura Disney: Identificação → Conflito → Virada → Final Marcante

🟦 Identificação
Você se olha no espelho e sente que algo mudou. "Será que é a idade?"

🟧 Conflito
Cremes, promessas e nada de resultado. A virada parece impossível. "Já tentei de tudo."

🟩 Virada
Com o Laser X, a pele volta a ter firmeza em poucas sessões.

🟪 Final Marcante
"Agende sua avaliação hoje." Sua melhor versão começa agora.

Sugestão de melhorias: reforçar o gancho inicial.
"""

GARBLED_SCRIPT = """Roteiro sobre Laser X

ğŸ¥ Tipo de ConteÃºdo: Reels
ğŸ¯ Objetivo: ğŸŸ¢ Criar ConexÃ£o

ğŸŸ¦ IdentificaÃ§Ã£o
Você se olha no espelho.

ğŸŸ§ Conflito
Nada funciona.

ğŸŸ© Virada
O Laser X muda tudo.

ğŸŸª Final Marcante
Agende hoje.
"""

UNSTRUCTURED_SCRIPT = """Script: Botox Premium

Três dicas para manter o resultado por mais tempo.

Use protetor solar todos os dias.
"""


@pytest.fixture
def sample_document():
    return parse_script(SAMPLE_SCRIPT)


@pytest.fixture
def validation():
    return ValidationResult(hook=9.2, clarity=7.0, cta=6.5, emotion=8.8, total=7.9)


@pytest.fixture
def script_file(tmp_path):
    path = tmp_path / "laser.txt"
    path.write_text(SAMPLE_SCRIPT, encoding="utf-8")
    return path
