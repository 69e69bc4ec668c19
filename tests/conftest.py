import pytest

from meli_listing.dom import PageSnapshot

LISTING_URL = "https://inmueble.mercadolibre.com.ar/MLA-2402497778-venta-ph-belgrano-r-2-ambientes-_JM"

LISTING_HTML = """
<html>
<head><title>PH en venta en Belgrano R | MercadoLibre</title></head>
<body>
  <div class="ui-pdp-header__subtitle"><span class="ui-pdp-subtitle">Venta · 2 ambientes</span></div>
  <h1 class="ui-pdp-title">Venta PH Belgrano R 2 Ambientes</h1>
  <div class="ui-pdp-price">
    <span class="andes-money-amount__currency-symbol">US$</span>
    <span class="andes-money-amount__fraction">135.000</span>
  </div>
  <p class="ui-pdp-color--GRAY ui-pdp-size--XSMALL ui-pdp-family--REGULAR ui-pdp-maintenance-fee-ltr">
    Expensas: $ 45.500
  </p>
  <div class="ui-pdp-gallery">
    <figure class="ui-pdp-gallery__figure">
      <img data-zoom="https://http2.mlstatic.com/D_NQ_NP_2X_111-MLA2402497778-F.webp"
           src="https://http2.mlstatic.com/D_NQ_NP_111-MLA2402497778-I.webp">
    </figure>
    <figure class="ui-pdp-gallery__figure">
      <img data-src="https://http2.mlstatic.com/D_NQ_NP_222-MLA2402497778-F-null.webp" src="">
    </figure>
    <figure class="ui-pdp-gallery__figure">
      <img src="/static/placeholder.png">
    </figure>
  </div>
  <div class="ui-pdp-image"><img src="https://http2.mlstatic.com/D_NQ_NP_2X_111-MLA2402497778-I.webp"></div>
  <table class="andes-table ui-pdp-specs__table">
    <tbody>
      <tr class="andes-table__row"><th class="andes-table__header">Superficie total</th><td class="andes-table__column">70 m²</td></tr>
      <tr class="andes-table__row"><th class="andes-table__header">Superficie cubierta</th><td class="andes-table__column">55,5 m²</td></tr>
      <tr class="andes-table__row"><th class="andes-table__header">Ambientes</th><td class="andes-table__column">2</td></tr>
      <tr class="andes-table__row"><th class="andes-table__header">Dormitorios</th><td class="andes-table__column">1</td></tr>
      <tr class="andes-table__row"><th class="andes-table__header">Baños</th><td class="andes-table__column">1</td></tr>
      <tr class="andes-table__row"><th class="andes-table__header">Antigüedad</th><td class="andes-table__column">A consultar</td></tr>
    </tbody>
  </table>
  <p class="ui-pdp-description__content">Hermoso PH reciclado a nuevo.</p>
  <div class="ui-pdp-media__title">Belgrano R, Capital Federal</div>
  <img class="ui-vip-location__map"
       src="https://maps.googleapis.com/maps/api/staticmap?center=-34.603%2C-58.381&amp;zoom=15&amp;size=600x300">
</body>
</html>
"""

BLOCKED_HTML = """
<html>
<head><title>Mercado Libre</title></head>
<body>
  <main>
    <h1>¡Hola! Para continuar, ingresa a tu cuenta</h1>
    <p>Para continuar, ingresa a Mercado Libre.</p>
    <h1 class="ui-pdp-title">No debería leerse</h1>
  </main>
</body>
</html>
"""


@pytest.fixture
def listing_page():
    return PageSnapshot(LISTING_HTML)


@pytest.fixture
def blocked_page():
    return PageSnapshot(BLOCKED_HTML)


@pytest.fixture
def make_page():
    def _make(body: str, title: str = "MercadoLibre") -> PageSnapshot:
        html = f"<html><head><title>{title}</title></head><body>{body}</body></html>"
        return PageSnapshot(html)
    return _make
