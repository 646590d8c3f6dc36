"""Tests for ArticleTextExtractor source selection, caching and output."""

import threading
import time
from datetime import datetime, timedelta, timezone

import pytest

from feedtext.crawler import FetchError
from feedtext.models import ArticleSource, ExtractionMethod

INLINE_CONTENT = (
    "<p>El gobierno regional presentó este lunes un ambicioso programa de ayudas para la "
    "rehabilitación de viviendas antiguas en los cascos históricos.</p>"
    "<p>Las solicitudes podrán presentarse durante los próximos tres meses, según informó "
    "la consejería, que prevé atender a dos mil familias. Publicado hace 3 horas.</p>"
)

DESCRIPTION = (
    "<p>Los vecinos del barrio norte celebraron la reapertura del mercado municipal "
    "tras dos años de obras de mejora.</p>"
)

TRUNCATED_CONTENT = (
    "<p>El consejo de administración del puerto aprobó las cuentas del ejercicio con un "
    "beneficio récord que destinará a nuevas inversiones en las terminales. Leer más</p>"
)

ARTICLE_URL = "https://diariolocal.example/movilidad"


def _assert_well_formed(article):
    assert article.body == "\n\n".join(article.paragraphs)
    assert 0.0 <= article.confidence <= 1.0
    assert article.extraction_method in set(ExtractionMethod)
    assert article.word_count == len(article.body.split())
    assert article.title


class TestSourceSelection:
    def test_inline_content_is_used_without_fetching(self, make_extractor, stub_fetcher, fixed_now):
        extractor = make_extractor(stub_fetcher)
        source = ArticleSource(
            link="https://diarioregional.example/ayudas",
            title="  Ayudas para rehabilitar viviendas | Diario Regional ",
            content_html=INLINE_CONTENT,
        )

        article = extractor.extract(source)

        _assert_well_formed(article)
        assert stub_fetcher.calls == []
        assert article.extraction_method is ExtractionMethod.RSS_CONTENT
        assert article.title == "Ayudas para rehabilitar viviendas"
        assert len(article.paragraphs) == 2
        assert article.extracted_pub_date == fixed_now - timedelta(hours=3)

    def test_description_is_used_when_content_is_missing(self, make_extractor, stub_fetcher):
        extractor = make_extractor(stub_fetcher)
        source = ArticleSource(
            link="https://diarioregional.example/mercado",
            title="Reabre el mercado",
            description_html=DESCRIPTION,
        )

        article = extractor.extract(source)

        assert stub_fetcher.calls == []
        assert article.extraction_method is ExtractionMethod.RSS_DESCRIPTION
        assert article.body.startswith("Los vecinos del barrio norte")

    def test_truncated_content_triggers_fetch(self, make_extractor, fetcher_factory, load_fixture):
        fetcher = fetcher_factory(pages={ARTICLE_URL: load_fixture("normal_article.html")})
        extractor = make_extractor(fetcher)
        source = ArticleSource(link=ARTICLE_URL, title=None, content_html=TRUNCATED_CONTENT)

        article = extractor.extract(source)

        _assert_well_formed(article)
        assert fetcher.calls == [ARTICLE_URL]
        assert article.extraction_method is ExtractionMethod.FETCHED_HTML_READABILITY
        assert article.title == "El Ayuntamiento aprueba el nuevo plan de movilidad"

    def test_short_feed_text_triggers_fetch(self, make_extractor, fetcher_factory, load_fixture):
        fetcher = fetcher_factory(pages={ARTICLE_URL: load_fixture("normal_article.html")})
        extractor = make_extractor(fetcher)
        source = ArticleSource(
            link=ARTICLE_URL, description_html="<p>Resumen breve.</p>", content_html="<p>Breve</p>"
        )

        extractor.extract(source)

        assert fetcher.calls == [ARTICLE_URL]


class TestFetchFailure:
    def test_http_error_falls_back_to_feed_text(self, make_extractor, stub_fetcher):
        extractor = make_extractor(stub_fetcher)
        source = ArticleSource(
            link="https://gaceta.example/nota",
            title="Titular de la nota | Gaceta",
            description_html="<p>Resumen corto del artículo…</p>",
        )

        article = extractor.extract(source)

        _assert_well_formed(article)
        assert stub_fetcher.calls == ["https://gaceta.example/nota"]
        assert article.extraction_method is ExtractionMethod.RSS_DESCRIPTION
        assert article.confidence == 0.3
        assert article.body == "Resumen corto del artículo…"
        assert article.title == "Titular de la nota"
        assert article.removed_sections == ()
        assert article.has_paywall_hint is False

    def test_longest_inline_text_is_kept(self, make_extractor, stub_fetcher):
        extractor = make_extractor(stub_fetcher)
        source = ArticleSource(
            link="https://gaceta.example/otra",
            description_html="<p>Corto...</p>",
            content_html="<p>Un texto algo más largo...</p>",
        )

        article = extractor.extract(source)

        assert article.body == "Un texto algo más largo..."

    def test_unexpected_errors_also_degrade(self, make_extractor, fetcher_factory):
        extractor = make_extractor(fetcher_factory(error=RuntimeError("connection reset")))

        article = extractor.extract(ArticleSource(link="https://gaceta.example/x"))

        assert article.confidence == 0.3
        assert article.body == ""
        assert article.paragraphs == ()
        assert article.title == "Articulo"

    def test_fetch_error_message(self):
        error = FetchError("https://a.example/", "HTTP 500", status_code=500)

        assert str(error) == "Failed to fetch https://a.example/: HTTP 500"


class TestCaching:
    def test_repeat_requests_hit_the_cache(self, make_extractor, fetcher_factory, load_fixture):
        fetcher = fetcher_factory(pages={ARTICLE_URL: load_fixture("normal_article.html")})
        extractor = make_extractor(fetcher)
        source = ArticleSource(link=ARTICLE_URL)

        first = extractor.extract(source)
        second = extractor.extract(source)

        assert second is first
        assert fetcher.calls == [ARTICLE_URL]
        assert extractor.cache.hits == 1

    def test_title_whitespace_does_not_change_the_key(self, make_extractor, fetcher_factory, load_fixture):
        fetcher = fetcher_factory(pages={ARTICLE_URL: load_fixture("normal_article.html")})
        extractor = make_extractor(fetcher)

        extractor.extract(ArticleSource(link=ARTICLE_URL, title="Plan de movilidad"))
        extractor.extract(ArticleSource(link=ARTICLE_URL, title="  Plan de movilidad  "))

        assert len(fetcher.calls) == 1

    def test_changed_feed_content_is_extracted_again(self, make_extractor, fetcher_factory, load_fixture):
        fetcher = fetcher_factory(pages={ARTICLE_URL: load_fixture("normal_article.html")})
        extractor = make_extractor(fetcher)

        extractor.extract(ArticleSource(link=ARTICLE_URL, title="Primera versión"))
        extractor.extract(ArticleSource(link=ARTICLE_URL, title="Segunda versión"))

        assert len(fetcher.calls) == 2

    def test_clear_cache_forces_refetch(self, make_extractor, fetcher_factory, load_fixture):
        fetcher = fetcher_factory(pages={ARTICLE_URL: load_fixture("normal_article.html")})
        extractor = make_extractor(fetcher)
        source = ArticleSource(link=ARTICLE_URL)

        extractor.extract(source)
        extractor.clear_cache()
        extractor.extract(source)

        assert len(fetcher.calls) == 2
        assert extractor.cache.hits == 0

    def test_title_with_lone_surrogate_is_cached(self, make_extractor, stub_fetcher):
        extractor = make_extractor(stub_fetcher)
        source = ArticleSource(
            link="https://diarioregional.example/ayudas", title="T\ud800", content_html=INLINE_CONTENT
        )

        first = extractor.extract(source)

        assert first.extraction_method is ExtractionMethod.RSS_CONTENT
        assert extractor.extract(source) is first
        assert extractor.cache.hits == 1
        assert stub_fetcher.calls == []

    def test_failure_results_are_cached_too(self, make_extractor, stub_fetcher):
        extractor = make_extractor(stub_fetcher)
        source = ArticleSource(link="https://gaceta.example/caida")

        extractor.extract(source)
        extractor.extract(source)

        assert len(stub_fetcher.calls) == 1

    def test_concurrent_requests_fetch_once(self, make_extractor, load_fixture):
        html = load_fixture("normal_article.html")

        class SlowFetcher:
            def __init__(self):
                self.calls = 0
                self._lock = threading.Lock()

            def fetch(self, url):
                with self._lock:
                    self.calls += 1
                time.sleep(0.05)
                return html

        fetcher = SlowFetcher()
        extractor = make_extractor(fetcher)
        source = ArticleSource(link=ARTICLE_URL)
        barrier = threading.Barrier(8)
        results = []
        results_lock = threading.Lock()

        def worker():
            barrier.wait()
            article = extractor.extract(source)
            with results_lock:
                results.append(article)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert fetcher.calls == 1
        assert len(results) == 8
        assert all(article is results[0] for article in results)


class TestFixturePages:
    def test_normal_article(self, make_extractor, load_fixture):
        article = make_extractor().extract_from_html(load_fixture("normal_article.html"), ARTICLE_URL)

        _assert_well_formed(article)
        assert article.extraction_method is ExtractionMethod.FETCHED_HTML_READABILITY
        assert article.confidence == 0.85
        assert article.detected_language == "es"
        assert len(article.paragraphs) == 3
        assert article.paragraphs[0].startswith("El pleno municipal aprobó")
        assert article.title == "El Ayuntamiento aprueba el nuevo plan de movilidad"
        assert article.removed_sections == ("nav", "script", "style")
        assert article.has_paywall_hint is False
        assert article.extracted_pub_date == datetime(2024, 3, 5, 7, 15, tzinfo=timezone.utc)
        assert "derechos reservados" not in article.body

    def test_cookie_banner(self, make_extractor, load_fixture):
        article = make_extractor().extract_from_html(
            load_fixture("cookie_banner.html"), "https://ciudadabierta.example/ruta"
        )

        _assert_well_formed(article)
        assert "cookies" not in article.body.lower()
        assert "cookie_banner" in article.removed_sections
        assert article.title == "Una nueva ruta ciclista conecta los dos grandes parques"
        assert len(article.paragraphs) == 3
        assert article.paragraphs[0].startswith("La nueva ruta ciclista")

    def test_paywall_stub(self, make_extractor, load_fixture):
        article = make_extractor().extract_from_html(
            load_fixture("paywall_stub.html"), "https://gacetanorte.example/puerto"
        )

        _assert_well_formed(article)
        assert article.has_paywall_hint is True
        assert "paywall" in article.removed_sections
        assert article.paragraphs == (
            "La autoridad portuaria negocia desde hace meses una ampliación que nadie ha explicado.",
        )
        assert article.confidence == pytest.approx(0.05)
        assert "suscriptores" not in article.body

    def test_related_links(self, make_extractor, load_fixture):
        article = make_extractor().extract_from_html(
            load_fixture("related_links.html"),
            "https://valleycourier.example/park",
            rss_title="City council approves new riverside park",
        )

        _assert_well_formed(article)
        assert "related" in article.removed_sections
        assert "Bridge repairs" not in article.body
        assert len(article.paragraphs) == 3
        assert article.detected_language == "en"
        assert article.extracted_pub_date == datetime(2024, 5, 2, 18, 0, tzinfo=timezone.utc)

    def test_share_counter_row_never_reaches_the_body(self, make_extractor):
        html = (
            "<article><p>0 Facebook Twitter 0 LinkedIn</p>"
            "<p>El precio subio un 5%, segun fuentes oficiales.</p></article>"
        )

        article = make_extractor().extract_from_html(html, "https://economia.example/precios")

        assert article.body == "El precio subio un 5%, segun fuentes oficiales."
        assert article.extraction_method is ExtractionMethod.FETCHED_HTML_FALLBACK

    def test_inline_cookie_consent_div(self, make_extractor):
        html = (
            '<div class="cookie-consent">Accept all cookies now</div>'
            "<p>Este es un parrafo real con suficiente longitud para contar como "
            "contenido valido del articulo.</p>"
        )

        article = make_extractor().extract_from_html(html, "https://noticias.example/nota")

        _assert_well_formed(article)
        assert article.removed_sections == ("cookie_banner",)
        assert "cookies" not in article.body.lower()
        assert article.body.startswith("Este es un parrafo real")

    def test_huge_relative_offset_gives_no_date(self, make_extractor):
        html = (
            "<article><p>Publicado hace " + "9" * 5000
            + " horas en la ciudad, segun fuentes.</p></article>"
        )

        article = make_extractor().extract_from_html(html, "https://noticias.example/hora")

        _assert_well_formed(article)
        assert article.extracted_pub_date is None
        assert article.body.endswith("horas en la ciudad, segun fuentes.")

    def test_extract_from_html_is_cached(self, make_extractor, load_fixture):
        extractor = make_extractor()
        html = load_fixture("normal_article.html")

        first = extractor.extract_from_html(html, ARTICLE_URL)

        assert extractor.extract_from_html(html, ARTICLE_URL) is first
