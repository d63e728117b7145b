import pytest

from guide_models import Token


@pytest.fixture
def guide_page_tokens():
    """First page of a typical guía de despacho, in no particular order."""
    return [
        Token("CANTIDAD", 50, 560),
        Token("DESCRIPCIÓN", 120, 560),
        Token("P. UNIT", 400, 560),
        Token("VALOR TOTAL", 480, 560),
        Token("GUIA DE DESPACHO ELECTRONICA", 200, 780),
        Token("Nº: 00023349", 420, 760),
        Token("Fecha Emisión:", 50, 740),
        Token("17/02/2026", 150, 740),
        Token("Señor(es):", 50, 720),
        Token("Constructora Andes Ltda", 130, 720),
        Token("Dirección:", 50, 700),
        Token("Av. Los Leones 1234", 130, 700),
        Token("N° DOC. INTERNO", 300, 700),
        Token("Dirección Destino:", 50, 680),
        Token("Camino a Melipilla 500", 160, 680),
        Token("Comuna Destino: Maipu", 330, 680),
        Token("Nombre Chofer:", 50, 660),
        Token("Juan Perez", 150, 660),
        Token("RUT Chofer:", 300, 660),
        Token("12.345.678-k", 380, 660),
        Token("Patente:", 50, 640),
        Token("ABCD-12", 150, 640),
        Token("Tipo Vehículo:", 300, 640),
        Token("Camion", 400, 640),
        Token("Nombre Coordinador:", 50, 620),
        Token("Maria Soto", 170, 620),
        Token("Nº Contrato:", 50, 600),
        Token("20000", 150, 600),
        Token("2", 55, 540),
        Token("Cajas azules", 120, 540),
        Token("1.500", 400, 540),
        Token("3.000", 480, 540),
        Token("OC: 4500123", 120, 530),
        Token("43,00", 52, 510),
        Token("Sacos cemento", 120, 510),
        Token("Portland", 210, 510),
        Token("900", 400, 510),
        Token("TOTAL", 400, 480),
        Token("OBSERVACIONES", 50, 470),
        Token("9", 50, 460),
        Token("RUT Transportista: 76.543.210-5", 50, 440),
    ]
