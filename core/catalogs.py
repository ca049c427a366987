"""
core/catalogs.py -- Fixed option catalogs for the equipment form.

Static configuration tables consulted by inventory/validation.py and the API models.
Keys are the values stored on a record (except locations, which are stored by
display name); labels are what an operator sees.
"""

from typing import Optional

MODEL_TYPES: dict[str, str] = {
    "ChromeBook": "ChromeBook",
    "CaixaDeSom": "Caixa de Som",
    "Desktop": "Desktop",
    "Estabilizador": "Estabilizador",
    "HubSwitch": "HubSwitch",
    "Impressora": "Impressora",
    "ModemWiFi": "Modem Wi-Fi",
    "Monitor": "Monitor",
    "Netbook": "Netbook",
    "NoBreak": "NoBreak",
    "Notebook": "Notebook",
    "Projetor": "Projetor ou Data Show",
    "Relogio": "Relógio Ponto",
    "Tela": "Tela Interativa",
    "Telefone": "Telefone Fixo",
    "Tablet": "Tablet",
    "Tv": "TV ou SmartTv",
    "Outro": "Outro equipamento",
}

RAM_SPECS: dict[str, str] = {
    "NotFound": "Não se Aplica",
    "2GBDDR2": "2GB RAM DDR2",
    "3GBDDR2": "3GB RAM DDR2",
    "2GBDDR3": "2GB RAM DDR3",
    "3GBDDR3": "3GB RAM DDR3",
    "4GBDDR3": "4GB RAM DDR3",
    "6GBDDR3": "6GB RAM DDR3",
    "8GBDDR3": "8GB RAM DDR3",
    "2GBDDR4": "2GB RAM DDR4",
    "3GBDDR4": "3GB RAM DDR4",
    "4GBDDR4": "4GB RAM DDR4",
    "6GBDDR4": "6GB RAM DDR4",
    "8GBDDR4": "8GB RAM DDR4",
    "4GBDDR5": "4GB RAM DDR5",
    "8GBDDR5": "8GB RAM DDR5",
}

LOCATIONS: dict[str, str] = {
    "escola_magi": "E.M.E.F. Luiz de Oliveira",
    "escola_magi_dois": "E.M.E.I. Estrelinha do Mar",
    "escola_pinhal": "E.M.E.F. Calil Miguel Alem",
    "escola_pinhal_dois": "E.M.E.I. Peixinho Dourado",
    "escola_pinhal_tres": "E.M.E.F. José Antônio",
    "escola_pinhal_quatro": "E.M.E.I. Golfinho do Mar",
    "escola_pinhal_cinco": "E.M.E.F. Antônio Francisco Nunes",
    "escola_tunel": "E.M.E.F. Barão de Santo Ângelo",
    "escola_tunel_dois": "E.M.E.I. Abelhinhas",
    "secretaria": "Secretaria Municipal de Educação e Cultura",
    "uab": "Universidade Aberta Brasileira",
}


def resolve_location(value: str) -> Optional[str]:
    """Map a location key or display name to its display name.

    Returns None when the value is neither.
    """
    if value in LOCATIONS:
        return LOCATIONS[value]
    if value in LOCATIONS.values():
        return value
    return None
