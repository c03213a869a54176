"""Extractor tests against trimmed copies of real product page markup."""
import pytest
from bs4 import BeautifulSoup

from lure_catalog.models import Color, FetchError, ScrapeError, UnknownSourceError
from lure_catalog.scrapers import (
    SOURCES, apia, bassday, blueblue, breaden, coreman, daiwa, deps, duel, duo, evergreen, get_source,
    hots, ivy_line, jackall, jackson, luckycraft, majorcraft, megabass, nories, osp, rapala,
    scrape_detail, shimano, smith, source_for, tacklehouse, with_overrides, zipbaits,
)

DUEL_URL = 'https://www.duel.co.jp/products/detail.php?pid=1234'
DUEL_HTML = """
<html><head><meta property="og:title" content="ハードコア ミノー - 釣具の総合メーカー デュエル"></head><body>
<h1 class="l-hero-detail_ttl"><span class="_main">ハードコア ミノー</span><span class="_sub">HARDCORE MINNOW 90mm/110mm</span></h1>
<div class="p-product-text">シーバス用のミノー。</div>
<table class="p-spec-table"><tbody>
<tr><td>F1234</td><td>F</td><td>90mm</td><td>10g</td><td>#5</td></tr>
<tr><td>F1235</td><td>F</td><td>110mm</td><td>15g</td><td>#4</td></tr>
<tr><td>-</td></tr>
</tbody></table>
<div class="p-product-list_wrapper"><div class="p-product-list_img"><img src="/img/c1.jpg"></div>
<div class="p-product-list_body"><h2 class="p-product-list_ttl">01.HGIW</h2><h3>ゴールドイワシ</h3></div></div>
<div class="p-product-list_wrapper"><div class="p-product-list_img"><img src="/img/c2.jpg"></div>
<div class="p-product-list_body"><h2 class="p-product-list_ttl">02.CHR</h2></div></div>
<div class="p-product-list_wrapper"><div class="p-product-list_img"></div>
<div class="p-product-list_body"><h3>未発売カラー</h3></div></div>
</body></html>
"""

JACKSON_URL = 'https://jackson.jp/products/athlete-9s'
JACKSON_HTML = """
<html><head><meta property="og:image" content="https://jackson.jp/og.jpg"></head><body>
<div class="products_detail">
 <div class="pageTitle"><h3><span class="en">Athlete 9S</span>アスリート 9S</h3>
  <ul class="tagList01"><li>シーバス</li></ul></div>
 <div class="about"><p>飛距離に優れたシンキングミノー。</p><p> </p></div>
 <div class="spec"><div class="spenTab"><table>
  <thead><tr><th>Name</th><th>Size</th><th>Weight</th><th>Price</th></tr></thead>
  <tbody>
   <tr><td>9S</td><td>90mm</td><td>12g</td><td>¥1,900(税込)</td></tr>
   <tr><td>9SS</td><td>90mm</td><td>18g</td><td>¥2,000(税込)</td></tr>
  </tbody></table></div></div>
 <div class="lineup"><div class="imgBox">
  <div class="photoBox"><img src="/img/c1.jpg"><span class="name">レッドヘッド</span></div>
  <div class="photoBox"><img src="/img/c2.jpg"><p>チャートバック</p></div>
  <div class="photoBox"><img src="/img/c3.jpg"><span class="name">レッドヘッド</span></div>
 </div></div>
</div></body></html>
"""

ZIPBAITS_URL = 'https://www.zipbaits.com/item/?i=12'
ZIPBAITS_HTML = """
<html><head><title>RIGGE 70F | SEABASS | ZIPBAITS</title></head><body>
<div id="colorArea">
 <div class="subject">リッジ 70F</div><div class="body">シーバスの定番ミノー。</div>
 <div class="item"><div><img src="../images/rigge70f.png">
  <p>サイズ：70mm<br>ウェイト：6.3g<br>￥1,700（税抜）<br>タイプ：フローティング</p></div></div>
 <div class="color"><article><div class="img"><img src="../images/color/001.jpg"></div><p>001 ナチュラルイワシ</p></article></div>
</div></body></html>
"""

TACKLEHOUSE_URL = 'https://www.tacklehouse.co.jp/product/k2f.html'
TACKLEHOUSE_HTML = """
<html><body>
<div class="breadcrumb">HOME &gt; SALTWATER &gt; K-TEN</div>
<h2>K2F 122</h2>
<p>飛距離と泳ぎを両立したK-TENセカンドジェネレーションのフローティングミノーです。</p>
<table class="table-striped">
 <thead><tr><th>Model</th><th>Length</th><th>Weight</th><th>Type</th><th>Price</th></tr></thead>
 <tbody>
  <tr><td>K2F122</td><td>122mm</td><td>23g</td><td>Floating</td><td>¥2,530(税込)</td></tr>
  <tr><td>K2F122T:2</td><td>122mm</td><td>29g</td><td>Floating</td><td>¥2,750(税込)</td></tr>
 </tbody></table>
<img src="../productphoto/k2f122.jpg">
<div class="yubi"><img src="k2f122_m01.jpg"><br>M01. パールイワシ</div>
<div class="yubi"><img src="k2f122_03.jpg">No.3 チャート</div>
</body></html>
"""

NORIES_URL = 'https://nories.com/bass/laydown-minnow-mid-110/'
NORIES_HTML = """
<html><body>
<div class="metabox"><span class="newscate">BASS</span><span class="newscate">HARD BAITS</span></div>
<h2 class="mainh2">LAYDOWN MINNOW MID 110</h2>
<article><img class="full-width" src="https://nories.com/wp-content/uploads/MAIN_ldm-1024x512.jpg"><h4>「レイダウンミノー ミッド110」</h4><p>ミッドレンジを泳ぐレイダウンミノーの110サイズ。</p></article>
<div class="ChangeElem_Panel specs"><table>
 <tr><th>Length</th><td>110mm</td></tr>
 <tr><th>Weight</th><td>1/2oz</td></tr>
 <tr><th>Price</th><td>¥2,100</td></tr>
</table></div>
<div class="ChangeElem_Panel colorchart"><table><tr>
 <td><img src="https://nories.com/wp-content/uploads/c1-150x150.jpg"><br>ワカサギ<br>NEW</td>
 <td><img src="https://nories.com/wp-content/uploads/c2-150x150.jpg"><br>チャートバックパール※限定<br></td>
 <td>✓</td>
</tr></table></div>
</body></html>
"""

SMITH_URL = 'https://www.smith.jp/product/trout/dcontact/dcontact.html'
SMITH_HTML = """
<html><head><title>D-コンタクト</title></head><body>
<div class="pro_topimg"><img src="/product/trout/dcontact/img/main.jpg"></div>
<div class="pro_toptext"><p class="mb20">渓流トラウトのためのヘビーシンキングミノー。</p></div>
<div class="pro_jouhou_in"><table>
 <tr><td>LENGTH</td><td>50mm</td></tr><tr><td>WEIGHT</td><td>4.5g</td></tr>
 <tr><td>TYPE</td><td>シンキング</td></tr><tr><td>PRICE</td><td>¥1,650(税抜)</td></tr>
</table></div>
<div class="pro_jouhou_in"><table>
 <tr><td>LENGTH</td><td>63mm</td></tr><tr><td>WEIGHT</td><td>7g</td></tr><tr><td>PRICE</td><td>¥1,750</td></tr>
</table></div>
<div class="pro_content_color"><a href="#"><img src="/img/c01.jpg"></a><p class="tx11">01. ヤマメ</p></div>
</body></html>
"""

MAJORCRAFT_URL = 'https://www.majorcraft.co.jp/lure/jigpara-short/'
MAJORCRAFT_HTML = """
<html><head><title>ジグパラ ショート – メジャークラフト</title></head><body>
<div class="js-products_sec__img_slider">
 <div class="slick-slide" data-slick-index="-1"><img src="https://www.majorcraft.co.jp/wp-content/uploads/clone-300x300.jpg"></div>
 <div class="slick-slide" data-slick-index="0"><img src="https://www.majorcraft.co.jp/wp-content/uploads/jigpara-600x400.jpg"></div>
</div>
<h2>ショアジギングの定番ジグ</h2>
<table>
 <tr><th>サイズ</th><th>価格</th></tr>
 <tr><td>20g</td><td>¥500(税込¥550)</td></tr>
 <tr><td>30g</td><td>¥600(税込¥660)</td></tr>
</table>
<ul><li class="lure-color_chart__color_list_item"><figure>
 <div class="lure-color_chart__color_list_img_block_inner"><img src="https://www.majorcraft.co.jp/wp-content/uploads/jp01-300x300.jpg"></div>
 <figcaption>#01 イワシ</figcaption></figure></li></ul>
</body></html>
"""

LUCKYCRAFT_URL = 'https://www.luckycraft.co.jp/product/salt/wander80.html'
LUCKYCRAFT_HTML = """
<html><head><title>Lucky Craft JAPAN - ワンダー80</title></head><body>
<div class="headerSalt">SALT / ソルト</div>
<div id="section1"><img src="images/wander80.jpg"><p>シーバス用シンキングペンシル。</p></div>
<table>
 <tr><td class="tableCategory">アイテム</td><td class="tableInside">Wander 80</td></tr>
 <tr><td class="tableCategory">全長</td><td class="tableInside">80</td></tr>
 <tr><td class="tableCategory">重量</td><td class="tableInside">11</td></tr>
</table>
{colors}
</body></html>
"""
LUCKYCRAFT_COLORS = """
<table class="itemlist"><tbody>
 <tr><td><img src="images/color/01.jpg"></td><td data-label="商品名">パールイワシ<br>MS Pearl</td></tr>
 <tr><td><img src="images/comingsoon.jpg"></td><td data-label="商品名">ゴールド</td></tr>
</tbody></table>
"""


class TestRegistry:

    def test_every_source_is_registered(self):
        assert len(SOURCES) == 25
        assert all(src.hosts for src in SOURCES.values())

    def test_source_for_host_and_subdomain(self):
        assert source_for('https://trout.nories.com/x/').slug == 'nories'
        assert source_for('https://www.smith.jp/product/a/b/').slug == 'smith'

    def test_source_for_unknown_host(self):
        with pytest.raises(UnknownSourceError):
            source_for('https://evil-nories.com/x/')

    def test_get_source(self):
        assert get_source(' IVY-LINE ').slug == 'ivy-line'
        with pytest.raises(UnknownSourceError):
            get_source('nobody')

    def test_with_overrides_ignores_unknown_keys(self):
        src = with_overrides(get_source('smith'), {'price_policy': 'max', 'bogus': 1})
        assert src.price_policy == 'max'
        assert get_source('smith').price_policy == 'min'


class TestScrapeDetail:
    """Dispatch through scrape_detail with a canned fetcher."""

    def test_browser_flags_reach_the_fetcher(self, fake_fetcher):
        f = fake_fetcher(DUEL_HTML)
        rec = scrape_detail(DUEL_URL, fetcher=f)
        url, kwargs = f.calls[0]
        assert url == DUEL_URL
        assert kwargs['browser'] is True
        assert kwargs['wait_selector'] == 'h1.l-hero-detail_ttl'
        assert rec.manufacturer_slug == 'duel'
        assert not f.closed

    def test_overrides(self, fake_fetcher):
        rec = scrape_detail(SMITH_URL, 'smith', fake_fetcher(SMITH_HTML), {'price_policy': 'max'})
        assert rec.price == 1925

    def test_empty_page_is_an_error(self, fake_fetcher):
        with pytest.raises(ScrapeError):
            scrape_detail(DUEL_URL, 'duel', fake_fetcher('<html><body></body></html>'))


class TestDuel:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(DUEL_URL, 'duel', fake_fetcher(DUEL_HTML))
        assert rec.name == 'ハードコア ミノー'
        assert rec.slug == 'hardcore-minnow'
        assert rec.type == 'ミノー'
        assert rec.target_fish == ['シーバス']
        assert rec.weights == [10.0, 15.0]
        assert rec.length == 90
        assert rec.price == 0
        assert rec.colors == [
            Color('ゴールドイワシ', 'https://www.duel.co.jp/img/c1.jpg'),
            Color('CHR', 'https://www.duel.co.jp/img/c2.jpg'),
        ]
        assert rec.main_image == 'https://www.duel.co.jp/img/c1.jpg'

    def test_name_slug(self):
        assert duel.name_slug('HARDCORE MINNOW 90mm/110mm', '') == 'hardcore-minnow'
        assert duel.name_slug('Monster Shot®', '') == 'monster-shot'


class TestJackson:

    def test_parse(self):
        frag = jackson.parse(JACKSON_URL, JACKSON_HTML)
        assert frag['name'] == 'Athlete 9S アスリート 9S'
        assert frag['slug'] == 'athlete-9s'
        assert frag['type'] == 'ミノー'
        assert frag['target_fish'] == ['シーバス']
        assert frag['main_image'] == 'https://jackson.jp/og.jpg'
        assert [v.price for v in frag['variants']] == [1900, 2000]

    def test_record(self, fake_fetcher):
        rec = scrape_detail(JACKSON_URL, 'jackson', fake_fetcher(JACKSON_HTML))
        assert rec.weights == [12.0, 18.0]
        assert rec.length == 90
        assert rec.price == 1900
        assert [c.name for c in rec.colors] == ['レッドヘッド', 'チャートバック']

    def test_sea_bass_is_not_black_bass(self):
        assert jackson.parse(JACKSON_URL, JACKSON_HTML.replace('シーバス', 'sea bass'))['target_fish'] == ['シーバス']


class TestZipbaits:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(ZIPBAITS_URL, 'zipbaits', fake_fetcher(ZIPBAITS_HTML))
        assert rec.name == 'RIGGE 70F'
        assert rec.slug == '12'
        assert rec.type == 'ミノー'
        assert rec.target_fish == ['シーバス']
        assert rec.price == 1870
        assert rec.weights == [6.3]
        assert rec.length == 70
        assert rec.colors == [Color('ナチュラルイワシ', 'https://www.zipbaits.com/images/color/001.jpg')]
        assert rec.main_image == 'https://www.zipbaits.com/images/rigge70f.png'


class TestTacklehouse:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(TACKLEHOUSE_URL, 'tacklehouse', fake_fetcher(TACKLEHOUSE_HTML))
        assert rec.name == 'K2F 122'
        assert rec.slug == 'k2f'
        assert rec.type == 'ミノー'
        assert rec.target_fish == ['シーバス']
        assert rec.price == 2530
        assert rec.weights == [23.0, 29.0]
        assert rec.length == 122
        assert [c.name for c in rec.colors] == ['パールイワシ', 'チャート']
        assert rec.colors[0].image_url == 'https://www.tacklehouse.co.jp/productphoto/k2f122_m01.jpg'
        assert rec.main_image == 'https://www.tacklehouse.co.jp/productphoto/k2f122.jpg'


class TestNories:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(NORIES_URL, 'nories', fake_fetcher(NORIES_HTML))
        assert rec.name == 'LAYDOWN MINNOW MID 110'
        assert rec.name_kana == 'レイダウンミノー ミッド110'
        assert rec.slug == 'laydown-minnow-mid-110'
        assert rec.type == 'ミノー'
        assert rec.target_fish == ['ブラックバス']
        assert rec.weights == [14.2]
        assert rec.length == 110
        assert rec.price == 2310
        assert rec.colors == [
            Color('ワカサギ', 'https://nories.com/wp-content/uploads/c1.jpg'),
            Color('チャートバックパール', 'https://nories.com/wp-content/uploads/c2.jpg'),
        ]
        assert rec.main_image == 'https://nories.com/wp-content/uploads/MAIN_ldm.jpg'

    def test_trout_subdomain(self):
        assert nories.target_fish('https://trout.nories.com/spoon/x/') == ['トラウト']


class TestSmith:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(SMITH_URL, 'smith', fake_fetcher(SMITH_HTML))
        assert rec.slug == 'trout-dcontact'
        assert rec.type == 'ミノー'
        assert rec.target_fish == ['トラウト']
        assert rec.price == 1815
        assert rec.weights == [4.5, 7.0]
        assert rec.length == 50
        assert rec.colors == [Color('ヤマメ', 'https://www.smith.jp/img/c01.jpg')]

    def test_make_slug(self):
        assert smith.make_slug('https://www.smith.jp/product/salt/gunship/') == 'salt-gunship'


class TestMajorCraft:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(MAJORCRAFT_URL, 'majorcraft', fake_fetcher(MAJORCRAFT_HTML))
        assert rec.name == 'ジグパラ ショート'
        assert rec.slug == 'jigpara-short'
        assert rec.type == 'メタルジグ'
        assert rec.target_fish == ['青物']
        assert rec.price == 660
        assert rec.weights == [20.0, 30.0]
        assert rec.main_image == 'https://www.majorcraft.co.jp/wp-content/uploads/jigpara.jpg'
        assert rec.colors == [
            Color('#01 イワシ', 'https://www.majorcraft.co.jp/wp-content/uploads/jp01-1024x1024.jpg'),
        ]

    def test_password_protected(self):
        with pytest.raises(ScrapeError):
            majorcraft.parse(MAJORCRAFT_URL, '<form><input name="post_password"></form>')


class TestLuckyCraft:

    def test_parse(self, fake_fetcher):
        html = LUCKYCRAFT_HTML.format(colors=LUCKYCRAFT_COLORS)
        rec = scrape_detail(LUCKYCRAFT_URL, 'luckycraft', fake_fetcher(html))
        assert rec.name == 'ワンダー80'
        assert rec.slug == 'wander80-salt'
        assert rec.type == 'シンキングペンシル'
        assert rec.target_fish == ['シーバス']
        assert rec.length == 80
        assert rec.weights == [11.0]
        assert rec.price == 0
        assert rec.colors == [
            Color('パールイワシ', 'https://www.luckycraft.co.jp/product/salt/images/color/01.jpg'),
            Color('ゴールド', ''),
        ]

    def test_single_finish(self, fake_fetcher):
        rec = scrape_detail(LUCKYCRAFT_URL, 'luckycraft', fake_fetcher(LUCKYCRAFT_HTML.format(colors='')))
        assert rec.colors == [
            Color('ワンダー80', 'https://www.luckycraft.co.jp/product/salt/images/wander80.jpg'),
        ]

    @pytest.mark.parametrize('url,slug', [
        ('https://www.luckycraft.co.jp/product/bass/sammy65.html', 'sammy65'),
        ('https://www.luckycraft.co.jp/product/area/crapea.html', 'crapea-area'),
        ('https://www.luckycraft.co.jp/product/swlightgame/aji/wander45.html', 'wander45-aji'),
    ])
    def test_make_slug(self, url, slug):
        assert luckycraft.make_slug(url) == slug


BLUEBLUE_URL = 'https://www.bluebluefishing.com/item/series/blowin/detail/?cd=blowin140s'
BLUEBLUE_HTML = """
<html><head><title>ブローウィン140S | ミノー | BlueBlueFishing</title></head><body>
<div class="itemDet_bigList"><img src="/images/item/blowin140s_main.jpg"></div>
<h1 class="itemDet_name">ブローウィン140S</h1>
<div class="itemDet_wisiwyg editor"><p>飛距離とスイムアクションを両立したシャローミノー。</p></div>
<div class="itemDet_setBody">全長：140mm<br>重さ：23g<br>フック：#4</div>
<div class="itemDet_setBody-price">¥2,420(税込)</div>
<select class="itemDet_select-long"><option>＃01 ブルーブルー × 23g 在庫あり</option></select>
<ul>
 <li class="itemDet_colorItem"><img src="/images/color/01.jpg">＃01 ブルーブルー</li>
 <li class="itemDet_colorItem"><img src="/images/color/02.jpg">＃02 イワシ</li>
</ul>
</body></html>
"""

DUO_URL = 'https://www.duo-inc.co.jp/product/123'
DUO_HTML = """
<html><head><title>Rough Trail Aomasa 188F - DUO</title></head><body>
<h2>SALT Rough Trail ラフトレイル</h2>
<h3 class="en">Rough Trail Aomasa 188F</h3>
<img src="https://www.duo-assets.example/product_images/rt188.jpg">
<p>¥3,520（税込）</p>
<dl><dt>Length</dt><dd>188mm</dd><dt>Weight</dt><dd>75g</dd><dt>Type</dt><dd>フローティング</dd></dl>
<a class="c-grid-card" href="#"><img src="https://www.duo-assets.example/icon_tip.png">
 <img src="https://www.duo-assets.example/colors/ada0088.jpg"><p>Rough Trail</p><p>ADA0088 マットチャート</p></a>
<a class="c-grid-card" href="#"><img src="https://www.duo-assets.example/colors/ccc3158.jpg"><p>CCC3158 レッドヘッド</p></a>
<a class="c-grid-card" href="#"><img src="https://www.duo-assets.example/related.jpg"><p>Related item</p></a>
</body></html>
"""

BERKLEY_URL = 'https://www.purefishing.jp/product/lure/berkley/pb-maxscent-flatworm.html'
BERKLEY_HTML = """
<html><body>
<h1 class="contentTitle">MaxScent Flat Worm 3.6inch（フラットワーム）</h1>
<div class="productSlider"><img src="/img/flatworm_main.jpg"></div>
<div class="productTextArea"><p class="contentText">水押しの強いフラットボディ。</p></div>
<div class="productColorValidationArea"><ul>
 <li class="thumbListItem"><img class="thumbImg" alt="GP（グリーンパンプキン）" src="/img/c/gp.jpg"></li>
 <li class="thumbListItem"><img class="thumbImg" alt="BLK（ブラック）" src="/img/c/blk.jpg"></li>
 <li class="thumbListItem"><img class="thumbImg" alt="カラー一覧" src="/img/c/all.jpg"></li>
</ul></div>
<div class="specTableWrap"><table>
 <tr><th>製品名</th><th>カラー</th><th>入数</th><th>本体価格</th></tr>
 <tr><td>PBMSFW3.6-GP</td><td>グリーンパンプキン</td><td>8</td><td>¥900</td></tr>
 <tr><td>PBMSFW3.6-BLK</td><td>ﾌﾞﾗｯｸ</td><td>8</td><td>¥900</td></tr>
</table></div>
</body></html>
"""

RAPALA_URL = 'https://www.rapala.co.jp/cn2/cd.html'
RAPALA_ESHOP = 'https://rapala-e-shop.com/item/cd5'
RAPALA_HTML = """
<html><head><title>CD (Countdown) | Rapala HP</title></head><body>
<div class="b-plain is-sp-hide"><div class="column -column1">
 <h2><picture><img src="/img/cd_main.jpg"></picture></h2>
 <p class="c-body c-center">カウントダウン</p>
 <p class="c-body c-center">シンキングミノー</p>
 <h4 class="c-small_headline">沈むラパラ</h4>
 <p class="c-body c-left">一定の速度で沈下するバルサミノー。</p>
 <table>
  <tr><td>MODEL</td><td>BODY LENGTH</td><td>WEIGHT</td><td>E-SHOP</td></tr>
  <tr><td>CD5</td><td>5cm</td><td>5g</td><td><a href="https://rapala-e-shop.com/item/cd5">BUY</a></td></tr>
  <tr><td>CD7</td><td>7cm</td><td>8g</td><td><a href="https://rapala-e-shop.com/item/cd7">BUY</a></td></tr>
 </table>
</div></div>
<div class="b-album">
 <div class="column -column3"><div class="c-img"><img src="/img/c/g.jpg"></div><h4 class="c-small_headline">G (ゴールド)</h4></div>
 <div class="column -column3"><picture><source type="image/webp" srcset="/img/c/s.webp"><img src="/img/c/s.jpg"></picture>
  <h4 class="c-small_headline">S (シルバー)</h4></div>
</div>
</body></html>
"""
RAPALA_ESHOP_HTML = '<html><body><div class="item_price">¥1,980(税込)</div></body></html>'

MEGABASS_URL = 'https://www.megabass.co.jp/site/products/popx/'
MEGABASS_HTML = """
<html><head><title>POPX | Megabass</title></head><body><main>
<nav>HOME BASS LURE TOPWATER</nav>
<h1>POPX</h1>
<section><div class="product_banner"><img src="/site/wp-content/uploads/popx_main.jpg"></div></section>
<p>ポッパーの常識を変えた、メガバスを代表するトップウォータープラグ。</p>
<div><h2>SPEC</h2><table>
 <tr><th>LENGTH</th><th>WEIGHT</th><th>TYPE</th><th>PRICE</th></tr>
 <tr><td>64.0mm</td><td>1/4oz</td><td>TOPWATER</td><td>¥2,450</td></tr>
</table></div>
<div><h2>COLOR VARIATION</h2><ul>
 <li><a href="/site/wp-content/uploads/popx_gg.jpg">GG WAKASAGI</a></li>
 <li><a href="/site/wp-content/uploads/popx_pm.jpg">PM SETSUKI AYU</a></li>
 <li><a href="/site/products/other/">OTHER</a></li>
</ul></div>
</main></body></html>
"""

APIA_URL = 'https://www.apiajapan.com/product/lure/hydro-upper/'
APIA_HTML = """
<html><head><meta name="description" content="APIA HYDRO UPPER"></head><body>
<h1>HYDRO UPPER 90S</h1>
<div class="productSingleHeader__subtype">#シンキングペンシル</div>
<span class="GenreLabel_genreLabel__x1">SEABASS</span>
<div class="productSingleHeader__image"><img src="https://images.microcms-assets.io/assets/hu90s.png"></div>
<div class="Price_price__a1">¥2,100</div>
<div class="specContent">全長 90mm 重量 17g</div>
<div class="articleContent">水面直下をゆらゆらと漂うように泳ぐハイドロアッパー。小型ベイトを偏食するシーバスに対して、
静かに長く見せられるのが最大の強みです。</div>
<script>self.__next_f.push({"variations":[{"title":"01 イワシ","thumbnail":{"url":"https://images.microcms-assets.io/c/01.jpg"}},{"title":"02 チャート","thumbnail":{"url":"https://images.microcms-assets.io/c/02.jpg"}}]})</script>
</body></html>
"""

DEPS_URL = 'https://www.depsweb.co.jp/product/buzzjet/'
DEPS_HTML = """
<html><body>
<h3 class="com-title"><span class="ff-ns">BUZZJET</span>SURFACE BAIT</h3>
<div class="title_image"><img src="/wp/wp-content/uploads/buzzjet_main.jpg"></div>
<dl class="dl-format01"><dt>唯一無二の水面系ルアー</dt><dd>羽根とジェットカップが生む独特の音で魚を呼ぶ。</dd></dl>
<ul class="mod-spec-list">
 <li><dl><dt>BUZZJET</dt><dd>LENGTH：75mm</dd><dd>WEIGHT：1oz class</dd><dd>PRICE：¥3,850(税込)</dd></dl></li>
 <li><dl><dt>BUZZJET Jr.</dt><dd>LENGTH：62mm</dd><dd>WEIGHT：5/8oz</dd><dd>生産終了</dd></dl></li>
</ul>
<ul class="mod-color_list">
 <li><figure><a href="/wp/wp-content/uploads/c01.jpg"><img src="/wp/wp-content/uploads/c01-s.jpg"></a><figcaption>#01 ブラック</figcaption></figure></li>
 <li><figure><a href="/wp/wp-content/uploads/c02.jpg"><img src="/wp/wp-content/uploads/c02-s.jpg"></a><figcaption>#02 チャート</figcaption></figure></li>
</ul>
</body></html>
"""

JACKALL_URL = 'https://www.jackall.co.jp/bass/products/lure/crank-bait/mask-kranky-50/'
JACKALL_HTML = """
<html><body>
<h1 class="page-main__title"><span class="title-main">MASK KRANKY 50</span><span class="title-kana">マスククランキー50</span></h1>
<div class="page-contents-main">
 <img src="/bass/wp-content/uploads/mk50_main.jpg">
 <h2 class="title-main black">タイトに攻めるシャロークランク</h2>
 <div class="product-color-list__item"><div class="photo-ratio"><img src="/bass/wp-content/uploads/c1.jpg"></div>
  <div class="caption"><p class="title">RTチャート</p></div></div>
 <div class="product-color-list__item"><div class="photo-ratio"><img src="/bass/wp-content/uploads/c2.jpg"></div>
  <div class="caption"><p class="title">ゴーストワカサギ</p></div></div>
</div>
<div class="product-spec--pc"><table>
 <tr><th>LENGTH</th><th>WEIGHT</th><th>TYPE</th><th>PRICE</th></tr>
 <tr><td>50mm</td><td>7.6g</td><td>Floating</td><td>¥1,760</td></tr>
</table></div>
</body></html>
"""

SHIMANO_URL = 'https://fish.shimano.com/ja-JP/product/lure/seabass/minnow/a155f00000c5crqqa3.html'
SHIMANO_HTML = """
<html><head><title>エクスセンス サイレントアサシン 129F | シマノ -Shimano-</title></head><body>
<h1>エクスセンス サイレントアサシン 129F</h1>
<h3>飛距離と泳ぎを両立したシーバスミノーの決定版</h3>
<div class="product-main__price">¥2,500</div>
<img src="https://dassets2.shimano.com/content/dam/Shimano/JP/fishing/product/lure/Product/silent_assassin_129f.jpg">
<div class="spec-table"><table>
 <tr><th>品番</th><th>カラー</th><th>全長(mm)</th><th>重量(g)</th><th>本体価格(円)</th></tr>
 <tr><td>212345</td><td>キョウリンイワシ</td><td>129</td><td>21</td><td>2,300</td></tr>
 <tr><td>212352</td><td>Nボラ</td><td>129</td><td>21</td><td>2,300</td></tr>
</table></div>
</body></html>
"""

DAIWA_URL = 'https://www.daiwa.com/jp/product/xr8bqa1/'
DAIWA_HTML = """
<html><head><title>モアザン スイッチヒッター | DAIWA</title></head><body>
<nav aria-label="breadcrumb">ホーム ルアー シーバス</nav>
<div class="product_detail">
 <h1 class="product_name">モアザン スイッチヒッター<br>MORETHAN SWITCH HITTER</h1>
 <img src="/jp/images/product/switchhitter_main.jpg">
 <p>港湾部で圧倒的な実績を誇るシンキングペンシル、スイッチヒッター。</p>
</div>
<div class="item_view">
 <div class="slick-slide slick-cloned"><img src="/jp/images/product/clone.jpg"><p>クローン</p></div>
 <div class="slick-slide"><img src="/jp/images/product/c01.jpg"><p class="caption">ライブリーイワシ（ホロ）</p></div>
 <div class="slick-slide"><img src="/jp/images/product/c02.jpg"><p>チャートヘッド</p></div>
</div>
<section class="spec"><table>
 <tr><th>アイテム</th><th>全長(mm)</th><th>自重(g)</th><th>メーカー希望本体価格(円)</th></tr>
 <tr><td>モアザン スイッチヒッター 85S</td><td>85</td><td>17</td><td>1,900</td></tr>
 <tr><td>モアザン スイッチヒッター 105S</td><td>105</td><td>24</td><td>2,000</td></tr>
</table></section>
</body></html>
"""

EVERGREEN_URL = 'https://www.evergreen-fishing.com/goods_list/ComboCrank_4.html'
EVERGREEN_HTML = """
<html><head><title>EVERGREEN INTERNATIONAL - コンバットクランク</title></head><body>
<ol><li>HOME</li><li>BASS</li><li>ハードルアー</li></ol>
<div id="contents">
 <h2>Search</h2>
 <h2>コンバットクランク480</h2>
 <div class="titleArea"><p>タフなフィールドで使えるクランクベイト。ラトル音と強い波動でバスを引き寄せる定番モデル。</p></div>
 <img src="/goods_detail/ComboCrank_4_08.jpg">
 <table class="spec">
  <tr><th>全長</th><td>60mm</td><th>自重</th><td>14g</td></tr>
  <tr><th>価格</th><td>¥1,800</td></tr>
 </table>
 <ul class="ccswitch_ul">
  <li><a href="resizeimg.php?image=../goods_detail/color/cc4_01.jpg"><img src="/goods_detail/color/cc4_01_s.jpg"></a><strong>マットタイガー</strong></li>
  <li><strong>■限定カラー</strong><img src="/x.jpg"></li>
  <li><a href="/goods_detail/color/cc4_02.jpg"><img src="/goods_detail/color/cc4_02_s.jpg"></a><strong>ワカサギ</strong></li>
 </ul>
</div>
</body></html>
"""

COREMAN_URL = 'https://www.coreman.jp/product_lure/vj-16/'
COREMAN_HTML = """
<html><head><title>VJ-16 バイブレーションジグヘッド | COREMAN</title>
<script type="application/ld+json">{"@type": "BreadcrumbList", "itemListElement": [{"name": "HOME"}, {"name": "LURE"}, {"name": "VJ-16"}]}</script>
</head><body><div class="e-con">
<img src="https://www.coreman.jp/wp-content/uploads/vj16-main-img.jpg">
<p>シーバスを狙うための究極のバイブレーションジグヘッド。専用ワームとの組み合わせで、ただ巻くだけで強烈な波動を生み出し、デイゲームからナイトゲームまで活躍する。</p>
<p>■ LURE SPEC ■<br>LENGTH：75mm<br>WEIGHT：16g<br>PRICE：1,180円(税別)</p>
{colors}
</div></body></html>
"""
COREMAN_COLORS = """
<figure><img src="https://www.coreman.jp/img/product/vj16/color-001.jpg"><figcaption>#001 イワシ</figcaption></figure>
<figure><img src="https://www.coreman.jp/img/product/vj16/color-002.jpg"><figcaption>#002 コノシロ</figcaption></figure>
"""

BASSDAY_URL = 'https://www.bassday.co.jp/item/?i=45'
BASSDAY_HTML = """
<html><head><title>シュガーミノー 70F | Bassday</title></head><body>
<div class="colorwrapper">
 <div class="subject">シュガーミノー 70F</div>
 <div class="body">渓流トラウトを狙うフローティングミノー。</div>
 <div class="inner">
  <div class="item"><img src="../../img/item/sugarminnow70f.png"></div>
  <p>シュガーミノー 70F<br>サイズ：70mm<br>ウエイト：5.5g<br>価格：¥1,400(税込)</p>
 </div>
</div>
<div class="color">
 <article><div class="img"><img src="../img/color/c1_s.jpg" data-flyout="../img/color/c1.jpg"></div><p>P-01 ヤマメ</p></article>
 <article><div class="img"><img src="../img/color/c2_s.jpg"></div><p>P-02 アユ</p></article>
</div>
</body></html>
"""

BREADEN_URL = 'https://breaden.net/products/metalmaru/'
BREADEN_HTML = """
<html><head>
<meta property="og:image" content="https://breaden.net/wp/img/metalmaru_main.jpg">
<meta name="description" content="ライトゲームで定番のブレード付きメタルバイブ。メバルやアジを広く探れる。">
<title>metalmaru | BREADEN</title></head><body>
<h1>メタルマル</h1>
<table>
 <tr><th>重量</th><td>13g</td></tr>
 <tr><th>全長</th><td>38mm</td></tr>
 <tr><th>価格</th><td>¥1,100(税抜)</td></tr>
</table>
<figure><img src="/wp/img/color/mm01.jpg"><figcaption>01 ゴールド</figcaption></figure>
<figure><img src="/wp/img/color/mm02.jpg"><figcaption>02 シルバー</figcaption></figure>
</body></html>
"""

IVY_URL = 'https://ivyline.jp/products/sylvia/'
IVY_HTML = """
<html><head>
<meta property="og:image" content="https://ivyline.jp/wp-content/uploads/sylvia.jpg">
<title>シルヴィア - 愛知県の釣具メーカー | IVY LINE</title></head><body>
<div class="breadcrumb">HOME PRODUCTS SPOON</div>
{h1}
<div class="post_content">
 <p>エリアトラウトの定番スプーン。スローリトリーブでも安定したアクションを生み出す。</p>
 <table>
  <tr><th>WEIGHT</th><th>SIZE</th><th>PRICE</th></tr>
  <tr><td>1.6g</td><td>28mm</td><td>¥550</td></tr>
  <tr><td>2.2g</td><td>31mm</td><td>¥580</td></tr>
 </table>
 <figure><img src="/wp-content/uploads/c/a01.jpg"><figcaption>A01 オリーブ</figcaption></figure>
 <figure><img src="/wp-content/uploads/c/a02.jpg"><figcaption>A02 ピンク</figcaption></figure>
</div>
</body></html>
"""

HOTS_URL = 'https://hots.co.jp/lure-keitan.html'
HOTS_HTML = """
<html><body>
<div class="content clm02"><img src="img/keitan_main.jpg?v=2"></div>
<div class="content clm03"><p class="txt">スロー系ジギングの元祖、ケイタンジグ。</p></div>
<div class="tableBlock"><table>
 <tr><td>100g ¥2,800<br>150g ¥3,300</td></tr>
</table></div>
<div class="row clm006">
 <div class="bs-grid-block"><div class="content"><img src="img/color/k01.jpg?1"><p class="txt">01. ブルーイワシ<br>Blue Iwashi</p></div></div>
 <div class="bs-grid-block"><div class="content"><img src="img/color/k02.jpg"><p class="txt">02. ピンクシルバー</p></div></div>
</div>
</body></html>
"""
HOTS_OZ_TABLE = """
<div class="tableBlock tableBlock_sb"><table>
 <thead><tr><th></th><th>1oz</th><th>2oz</th></tr></thead>
 <tbody>
  <tr><td>Length</td><td>80mm</td><td>100mm</td></tr>
  <tr><td>本体価格</td><td>¥1,500</td><td>¥1,800</td></tr>
 </tbody>
</table></div>
"""

OSP_URL = 'https://www.o-s-p.net/products/blitz/'
OSP_HTML = """
<html><head><title>ブリッツ | O.S.P</title></head><body>
<h3>BLITZ</h3>
<h4 class="h4_item">ブリッツ</h4>
<img class="freeimg" src="/wp-content/uploads/products_main_blitz.jpg">
<p>タイトなウォブンロールと高い回避性能で、ショートバイトをものにするシャロークランク。オカッパリからボートまで幅広く使える。</p>
<dl><dt>Length</dt><dd>50mm</dd><dt>Weight</dt><dd>7.0g</dd><dt>Type</dt><dd>Floating</dd><dt>Price</dt><dd>1,870円（税込）</dd></dl>
<ul class="optionitem">
 <li><img src="../../img/products/blitz/img_ms01.jpg" alt="マットタイガー"></li>
 <li><img src="img_ayu01.jpg"></li>
 <li><img src="../../img/products/weight.png"></li>
</ul>
</body></html>
"""


class TestBlueBlue:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(BLUEBLUE_URL, 'blueblue', fake_fetcher(BLUEBLUE_HTML))
        assert rec.name == 'ブローウィン140S'
        assert rec.slug == 'blowin-140s'
        assert rec.type == 'ミノー'
        assert rec.target_fish == ['シーバス']
        assert rec.weights == [23.0]
        assert rec.length == 140
        assert rec.price == 2420
        assert rec.colors == [
            Color('01 ブルーブルー', 'https://www.bluebluefishing.com/images/color/01.jpg'),
            Color('02 イワシ', 'https://www.bluebluefishing.com/images/color/02.jpg'),
        ]
        assert rec.main_image == 'https://www.bluebluefishing.com/images/item/blowin140s_main.jpg'

    @pytest.mark.parametrize('name,slug', [
        ('ブローウィン140S', 'blowin-140s'),
        ('シーライド 30', 'sea-ride'),
        ('ブローウィン 140S Slim', 'blowin-140s-slim'),
    ])
    def test_make_slug(self, name, slug):
        assert blueblue.make_slug(name, BLUEBLUE_URL) == slug


class TestDuo:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(DUO_URL, 'duo', fake_fetcher(DUO_HTML))
        assert rec.name == 'Rough Trail Aomasa 188F'
        assert rec.name_kana == 'ラフトレイル'
        assert rec.slug == 'rough-trail-aomasa-188f'
        assert rec.type == 'ミノー'
        assert rec.target_fish == ['シーバス']
        assert rec.weights == [75.0]
        assert rec.length == 188
        assert rec.price == 3520
        assert rec.colors == [
            Color('ADA0088 マットチャート', 'https://www.duo-assets.example/colors/ada0088.jpg'),
            Color('CCC3158 レッドヘッド', 'https://www.duo-assets.example/colors/ccc3158.jpg'),
        ]
        assert rec.main_image == 'https://www.duo-assets.example/product_images/rt188.jpg'

    def test_weight_range_keeps_lower_bound(self):
        frag = duo.parse(DUO_URL, DUO_HTML.replace('<dd>75g</dd>', '<dd>13~17g</dd>'))
        assert frag['variants'][0].weights == [13.0]


class TestBerkley:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(BERKLEY_URL, 'berkley', fake_fetcher(BERKLEY_HTML))
        assert rec.name == 'MaxScent Flat Worm 3.6inch（フラットワーム）'
        assert rec.name_kana == 'フラットワーム'
        assert rec.slug == 'pb-maxscent-flatworm'
        assert rec.type == 'ワーム'
        assert rec.target_fish == ['ブラックバス']
        assert rec.weights == []
        assert rec.length == 91
        assert rec.price == 990
        assert rec.colors == [
            Color('グリーンパンプキン', 'https://www.purefishing.jp/img/c/gp.jpg'),
            Color('ブラック', 'https://www.purefishing.jp/img/c/blk.jpg'),
        ]
        assert rec.main_image == 'https://www.purefishing.jp/img/flatworm_main.jpg'

    def test_listing_page_is_an_error(self, fake_fetcher):
        with pytest.raises(ScrapeError):
            scrape_detail(BERKLEY_URL, 'berkley', fake_fetcher('<html><body><ul class="list"></ul></body></html>'))


class TestRapala:

    def test_parse_with_eshop_price(self, fake_fetcher):
        f = fake_fetcher({RAPALA_URL: RAPALA_HTML, RAPALA_ESHOP: RAPALA_ESHOP_HTML})
        rec = scrape_detail(RAPALA_URL, 'rapala', f)
        assert rec.name == 'Countdown'
        assert rec.name_kana == 'カウントダウン'
        assert rec.slug == 'rapala-cd'
        assert rec.type == 'ミノー'
        assert rec.target_fish == ['シーバス', 'トラウト']
        assert rec.weights == [5.0, 8.0]
        assert rec.length == 50
        assert rec.price == 1980
        assert rec.description == '沈むラパラ\n一定の速度で沈下するバルサミノー。'
        assert rec.colors == [
            Color('G (ゴールド)', 'https://www.rapala.co.jp/img/c/g.jpg'),
            Color('S (シルバー)', 'https://www.rapala.co.jp/img/c/s.webp'),
        ]
        assert rec.main_image == 'https://www.rapala.co.jp/img/cd_main.jpg'
        url, kwargs = f.calls[1]
        assert url == RAPALA_ESHOP
        assert kwargs['visible'] is True

    def test_eshop_unreachable_leaves_price_unknown(self, fake_fetcher):
        rec = scrape_detail(RAPALA_URL, 'rapala', fake_fetcher({RAPALA_URL: RAPALA_HTML}))
        assert rec.price == 0
        assert rec.weights == [5.0, 8.0]

    def test_eshop_urls(self):
        frag = rapala.parse(RAPALA_URL, RAPALA_HTML)
        assert frag['eshop_urls'] == [RAPALA_ESHOP, 'https://rapala-e-shop.com/item/cd7']

    def test_eshop_price_lowest_variation(self):
        html = ('<div class="result_item"><span class="price">¥2,200(税込)</span></div>'
                '<div class="result_item"><span class="price">¥1,870(税込)</span></div>')
        assert rapala.eshop_price(html) == 1870
        assert rapala.eshop_price('<p>SOLD OUT</p>') == 0

    @pytest.mark.parametrize('url,slug', [
        ('https://www.rapala.co.jp/cn6/wiggle_wart.html', 'storm-wiggle_wart'),
        ('https://www.rapala.co.jp/cn9/kwikfish.html', 'luhrjensen-kwikfish'),
    ])
    def test_make_slug(self, url, slug):
        assert rapala.make_slug(url) == slug


class TestMegabass:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(MEGABASS_URL, 'megabass', fake_fetcher(MEGABASS_HTML))
        assert rec.name == 'POPX'
        assert rec.name_kana == 'ポップエックス'
        assert rec.slug == 'popx'
        assert rec.type == 'ポッパー'
        assert rec.target_fish == ['ブラックバス']
        assert rec.weights == [7.1]
        assert rec.length == 64
        assert rec.price == 2695
        assert rec.colors == [
            Color('GG WAKASAGI', 'https://www.megabass.co.jp/site/wp-content/uploads/popx_gg.jpg'),
            Color('PM SETSUKI AYU', 'https://www.megabass.co.jp/site/wp-content/uploads/popx_pm.jpg'),
        ]
        assert rec.main_image == 'https://www.megabass.co.jp/site/wp-content/uploads/popx_main.jpg'

    def test_price_range_is_the_cheapest(self):
        assert megabass.price_of('¥1,800～¥2,000') == 1980
        assert megabass.price_of('¥2,200(税込)') == 2200

    def test_name_kana_suffix(self):
        assert megabass.name_kana('Vision 110 +1') == 'ビジョン 110 +1'


class TestApia:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(APIA_URL, 'apia', fake_fetcher(APIA_HTML))
        assert rec.name == 'HYDRO UPPER 90S'
        assert rec.slug == 'hydro-upper'
        assert rec.type == 'シンキングペンシル'
        assert rec.target_fish == ['シーバス']
        assert rec.weights == [17.0]
        assert rec.length == 90
        assert rec.price == 2310
        assert rec.colors == [
            Color('01 イワシ', 'https://images.microcms-assets.io/c/01.jpg'),
            Color('02 チャート', 'https://images.microcms-assets.io/c/02.jpg'),
        ]
        assert rec.main_image == 'https://images.microcms-assets.io/assets/hu90s.png'

    def test_carousel_colors(self):
        soup = BeautifulSoup(
            '<div class="productVariationCarousel__item">'
            '<img src="https://images.microcms-assets.io/assets/apia_12ブルーイワシ.jpg"></div>',
            'html.parser',
        )
        assert apia.carousel_colors(soup, APIA_URL) == [
            ('ブルーイワシ', 'https://images.microcms-assets.io/assets/apia_12ブルーイワシ.jpg'),
        ]

    def test_genre_fish(self):
        assert apia.genre_fish(['LIGHT GAME', 'ROCK FISH']) == ['アジ', 'メバル', 'ロックフィッシュ']


class TestDeps:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(DEPS_URL, 'deps', fake_fetcher(DEPS_HTML))
        assert rec.name == 'BUZZJET'
        assert rec.slug == 'buzzjet'
        assert rec.type == 'トップウォーター'
        assert rec.target_fish == ['ブラックバス']
        # the discontinued Jr. keeps its length but not its weight
        assert rec.weights == [28.3]
        assert rec.length == 75
        assert rec.price == 3850
        assert rec.colors == [
            Color('#01 ブラック', 'https://www.depsweb.co.jp/wp/wp-content/uploads/c01.jpg'),
            Color('#02 チャート', 'https://www.depsweb.co.jp/wp/wp-content/uploads/c02.jpg'),
        ]
        assert rec.main_image == 'https://www.depsweb.co.jp/wp/wp-content/uploads/buzzjet_main.jpg'

    def test_not_found_page(self, fake_fetcher):
        html = '<div class="p-section p-detail">お探しのページは見つかりませんでした。</div>'
        with pytest.raises(ScrapeError):
            scrape_detail(DEPS_URL, 'deps', fake_fetcher(html))

    def test_name_beats_category(self):
        assert deps.detect_type('SLIDE SWIMMER 250', 'BIG BAIT') == 'ビッグベイト'
        assert deps.detect_type('Deathadder JIG HEAD', 'SOFT BAIT') == 'ジグヘッド'


class TestJackall:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(JACKALL_URL, 'jackall', fake_fetcher(JACKALL_HTML))
        assert rec.name == 'マスククランキー50'
        assert rec.slug == 'mask-kranky-50'
        assert rec.type == 'クランクベイト'
        assert rec.weights == [7.6]
        assert rec.length == 50
        assert rec.price == 1760
        assert rec.colors == [
            Color('RTチャート', 'https://www.jackall.co.jp/bass/wp-content/uploads/c1.jpg'),
            Color('ゴーストワカサギ', 'https://www.jackall.co.jp/bass/wp-content/uploads/c2.jpg'),
        ]
        assert rec.main_image == 'https://www.jackall.co.jp/bass/wp-content/uploads/mk50_main.jpg'

    def test_swapped_title_spans(self):
        html = JACKALL_HTML.replace(
            '<span class="title-main">MASK KRANKY 50</span><span class="title-kana">マスククランキー50</span>',
            '<span class="title-main">マスククランキー50</span><span class="title-kana">MASK KRANKY 50</span>',
        )
        frag = jackall.parse(JACKALL_URL, html)
        assert frag['name'] == 'マスククランキー50'
        assert frag['type_hint'] == 'MASK KRANKY 50'


class TestShimano:

    def test_parse(self, fake_fetcher):
        f = fake_fetcher(SHIMANO_HTML)
        rec = scrape_detail(SHIMANO_URL, 'shimano', f)
        assert f.calls[0][1]['visible'] is True
        assert rec.name == 'エクスセンス サイレントアサシン 129F'
        assert rec.slug == 'a155f00000c5crqqa3'
        assert rec.type == 'ミノー'
        assert rec.target_fish == ['シーバス']
        assert rec.weights == [21.0]
        assert rec.length == 129
        # header 2,750 and rows 2,530: the cheapest wins
        assert rec.price == 2530
        assert rec.colors == [
            Color('キョウリンイワシ', shimano.SKU_IMAGE.format(code='212345')),
            Color('Nボラ', shimano.SKU_IMAGE.format(code='212352')),
        ]
        assert rec.main_image == (
            'https://dassets2.shimano.com/content/dam/Shimano/JP/fishing/product/lure/Product/silent_assassin_129f.jpg'
        )

    def test_access_denied(self):
        with pytest.raises(FetchError) as exc:
            shimano.parse(SHIMANO_URL, '<html><head><title>Access Denied</title></head></html>')
        assert exc.value.status == 403
        assert exc.value.url == SHIMANO_URL


class TestDaiwa:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(DAIWA_URL, 'daiwa', fake_fetcher(DAIWA_HTML))
        assert rec.name == 'モアザン スイッチヒッター'
        assert rec.slug == 'xr8bqa1'
        assert rec.type == 'シンキングペンシル'
        assert rec.target_fish == ['シーバス']
        assert rec.weights == [17.0, 24.0]
        assert rec.length == 85
        assert rec.price == 2090
        assert rec.colors == [
            Color('ライブリーイワシ', 'https://www.daiwa.com/jp/images/product/c01.jpg'),
            Color('チャートヘッド', 'https://www.daiwa.com/jp/images/product/c02.jpg'),
        ]
        assert rec.main_image == 'https://www.daiwa.com/jp/images/product/switchhitter_main.jpg'

    def test_item_column_colors_without_gallery(self):
        html = DAIWA_HTML.replace('class="item_view"', 'class="other_view"')
        frag = daiwa.parse(DAIWA_URL, html)
        assert frag['colors'] == [('85S', ''), ('105S', '')]


class TestEvergreen:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(EVERGREEN_URL, 'evergreen', fake_fetcher(EVERGREEN_HTML))
        assert rec.name == 'コンバットクランク480'
        assert rec.slug == 'combocrank_4'
        assert rec.type == 'クランクベイト'
        assert rec.target_fish == ['ブラックバス']
        assert rec.weights == [14.0]
        assert rec.length == 60
        assert rec.price == 1980
        assert rec.colors == [
            Color('マットタイガー', 'https://www.evergreen-fishing.com/goods_detail/color/cc4_01.jpg'),
            Color('ワカサギ', 'https://www.evergreen-fishing.com/goods_detail/color/cc4_02.jpg'),
        ]
        assert rec.main_image == 'https://www.evergreen-fishing.com/goods_detail/ComboCrank_4_08.jpg'

    def test_full_image(self):
        base = 'https://www.evergreen-fishing.com/goods_list/x.html'
        assert evergreen.full_image('resizeimg.php?w=80', base) == ''
        assert evergreen.full_image('', base) == ''


class TestCoreman:

    def test_parse(self, fake_fetcher):
        html = COREMAN_HTML.replace('{colors}', COREMAN_COLORS)
        rec = scrape_detail(COREMAN_URL, 'coreman', fake_fetcher(html))
        assert rec.name == 'VJ-16 バイブレーションジグヘッド'
        assert rec.slug == 'vj-16'
        assert rec.type == 'バイブレーションジグヘッド'
        assert rec.target_fish == ['シーバス']
        assert rec.weights == [16.0]
        assert rec.length == 75
        assert rec.price == 1298
        assert rec.colors == [
            Color('#001 イワシ', 'https://www.coreman.jp/img/product/vj16/color-001.jpg'),
            Color('#002 コノシロ', 'https://www.coreman.jp/img/product/vj16/color-002.jpg'),
        ]
        assert rec.main_image == 'https://www.coreman.jp/wp-content/uploads/vj16-main-img.jpg'

    def test_single_finish(self, fake_fetcher):
        rec = scrape_detail(COREMAN_URL, 'coreman', fake_fetcher(COREMAN_HTML.replace('{colors}', '')))
        assert rec.colors == [
            Color('VJ-16 バイブレーションジグヘッド', 'https://www.coreman.jp/wp-content/uploads/vj16-main-img.jpg'),
        ]

    def test_breadcrumb(self):
        soup = BeautifulSoup(COREMAN_HTML, 'html.parser')
        assert coreman.breadcrumb(soup) == 'HOME > LURE > VJ-16'


class TestBassday:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(BASSDAY_URL, 'bassday', fake_fetcher(BASSDAY_HTML))
        assert rec.name == 'シュガーミノー 70F'
        assert rec.slug == '45'
        assert rec.type == 'ミノー'
        assert rec.target_fish == ['トラウト']
        assert rec.weights == [5.5]
        assert rec.length == 70
        assert rec.price == 1400
        assert rec.colors == [
            Color('P-01 ヤマメ', 'https://www.bassday.co.jp/img/color/c1.jpg'),
            Color('P-02 アユ', 'https://www.bassday.co.jp/img/color/c2_s.jpg'),
        ]
        assert rec.main_image == 'https://www.bassday.co.jp/img/item/sugarminnow70f.png'

    @pytest.mark.parametrize('texts,fish', [
        (('ライトソルト メバリング',), ['メバル']),
        (('オフショア キャスティング',), ['青物']),
        (('港湾の夜',), ['シーバス']),
    ])
    def test_detect_fish(self, texts, fish):
        assert bassday.detect_fish(*texts) == fish


class TestBreaden:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(BREADEN_URL, 'breaden', fake_fetcher(BREADEN_HTML))
        assert rec.name == 'メタルマル'
        assert rec.slug == 'metalmaru'
        assert rec.type == 'メタルバイブ'
        assert rec.target_fish == ['メバル', 'アジ']
        assert rec.weights == [13.0]
        assert rec.length == 38
        assert rec.price == 1210
        assert rec.colors == [
            Color('01 ゴールド', 'https://breaden.net/wp/img/color/mm01.jpg'),
            Color('02 シルバー', 'https://breaden.net/wp/img/color/mm02.jpg'),
        ]
        assert rec.main_image == 'https://breaden.net/wp/img/metalmaru_main.jpg'

    def test_default_fish(self):
        assert breaden.target_fish('Plain Lure', '') == ['シーバス', 'メバル', 'アジ', 'クロダイ']


class TestIvyLine:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(IVY_URL, 'ivy-line', fake_fetcher(IVY_HTML.format(h1='<h1>シルヴィア</h1>')))
        assert rec.name == 'シルヴィア'
        assert rec.slug == 'sylvia'
        assert rec.type == 'スプーン'
        assert rec.target_fish == ['トラウト']
        assert rec.weights == [1.6, 2.2]
        assert rec.length == 28
        assert rec.price == 550
        assert rec.colors == [
            Color('オリーブ', 'https://ivyline.jp/wp-content/uploads/c/a01.jpg'),
            Color('ピンク', 'https://ivyline.jp/wp-content/uploads/c/a02.jpg'),
        ]
        assert rec.main_image == 'https://ivyline.jp/wp-content/uploads/sylvia.jpg'

    def test_name_from_title(self):
        frag = ivy_line.parse(IVY_URL, IVY_HTML.format(h1=''))
        assert frag['name'] == 'シルヴィア'


class TestHots:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(HOTS_URL, 'hots', fake_fetcher(HOTS_HTML))
        assert rec.name == 'KEITAN JIG'
        assert rec.slug == 'keitan-jig'
        assert rec.type == 'メタルジグ'
        assert rec.target_fish == ['マグロ', 'ヒラマサ', 'カンパチ', 'ブリ']
        assert rec.weights == [100.0, 150.0]
        assert rec.price == 3080
        assert rec.description == 'スロー系ジギングの元祖、ケイタンジグ。'
        assert rec.colors == [
            Color('ブルーイワシ', 'https://hots.co.jp/img/color/k01.jpg'),
            Color('ピンクシルバー', 'https://hots.co.jp/img/color/k02.jpg'),
        ]
        assert rec.main_image == 'https://hots.co.jp/img/keitan_main.jpg'

    def test_ounce_columns(self):
        variants = hots.spec_variants(BeautifulSoup(HOTS_OZ_TABLE, 'html.parser'))
        assert [(v.weights, v.length, v.price) for v in variants] == [
            ([28], 80, 1650),
            ([57], 100, 1980),
        ]


class TestOsp:

    def test_parse(self, fake_fetcher):
        rec = scrape_detail(OSP_URL, 'osp', fake_fetcher(OSP_HTML))
        assert rec.name == 'BLITZ'
        assert rec.slug == 'blitz'
        assert rec.type == 'クランクベイト'
        assert rec.target_fish == ['ブラックバス']
        assert rec.weights == [7.0]
        assert rec.length == 50
        assert rec.price == 1870
        assert rec.colors == [
            Color('マットタイガー', 'https://www.o-s-p.net/img/products/blitz/img_ms01.jpg'),
            Color('AYU01', 'https://www.o-s-p.net/img/products/img_ayu01.jpg'),
        ]
        assert rec.main_image == 'https://www.o-s-p.net/wp-content/uploads/products_main_blitz.jpg'

    @pytest.mark.parametrize('name,fish', [
        ('Bonneville 40g', ['青物']),
        ('Durga Area', ['トラウト']),
        ('HP Minnow', ['ブラックバス']),
    ])
    def test_target_fish(self, name, fish):
        frag = osp.parse(OSP_URL, OSP_HTML.replace('<h3>BLITZ</h3>', f'<h3>{name}</h3>'))
        assert frag['target_fish'] == fish
