from __future__ import annotations

import json
import tempfile
import unittest
import xml.etree.ElementTree as ET
from datetime import date
from pathlib import Path

from videocatalog.catalog import DEFAULT_CATEGORIES, DEFAULT_VIDEOS, default_videos
from videocatalog.models import Category, Video
from videocatalog.sitemap import (
    SitemapConfig,
    SitemapError,
    build_sitemap_file,
    expiration_date,
    generate_simple_sitemap,
    generate_sitemap,
)

SM = "{http://www.sitemaps.org/schemas/sitemap/0.9}"
TODAY = date(2024, 2, 1)


class SitemapTests(unittest.TestCase):
    def setUp(self) -> None:
        self.config = SitemapConfig(domain="https://example.com")
        self.videos = default_videos()
        self.categories = [Category(**c) for c in DEFAULT_CATEGORIES]

    def test_expiration_is_one_year_after_upload(self) -> None:
        self.assertEqual(expiration_date("2024-01-10"), "2025-01-10")
        self.assertEqual(expiration_date("2024-02-29"), "2025-03-01")

    def test_document_is_well_formed_with_every_page(self) -> None:
        xml = generate_sitemap(self.config, self.videos, self.categories, TODAY)
        root = ET.fromstring(xml.encode("utf-8"))
        locs = [u.find(f"{SM}loc").text for u in root.findall(f"{SM}url")]
        self.assertEqual(len(locs), 2 + 8 + 4 + 6)
        self.assertEqual(locs[0], "https://example.com/")
        self.assertIn("https://example.com/search", locs)
        self.assertIn("https://example.com/category/trending", locs)
        self.assertIn("https://example.com/2257", locs)
        self.assertIn("https://example.com/video/6", locs)

    def test_static_entries(self) -> None:
        xml = generate_sitemap(self.config, [], self.categories, TODAY)
        self.assertIn("<lastmod>2024-02-01</lastmod>", xml)
        self.assertIn("<priority>1</priority>", xml)
        self.assertIn("<priority>0.9</priority>", xml)
        self.assertIn("<changefreq>monthly</changefreq>", xml)
        self.assertNotIn("<video:video>", xml)

    def test_video_entry(self) -> None:
        xml = generate_sitemap(self.config, self.videos[:1], [], TODAY)
        self.assertIn("<lastmod>2024-01-10</lastmod>", xml)
        self.assertIn("<video:thumbnail_loc>https://example.com/assets/thumbnails/thumb1.jpg</video:thumbnail_loc>", xml)
        self.assertIn("<video:title><![CDATA[Premium HD Experience]]></video:title>", xml)
        self.assertIn("<video:content_loc>https://example.com/video/video1</video:content_loc>", xml)
        self.assertIn('<video:player_loc allow_embed="yes" autoplay="ap=1">https://example.com/video/embed/1</video:player_loc>', xml)
        self.assertIn("<video:duration>634</video:duration>", xml)
        self.assertIn("<video:expiration_date>2025-01-10</video:expiration_date>", xml)
        self.assertIn("<video:rating>4.8</video:rating>", xml)
        self.assertIn("<video:view_count>12500</video:view_count>", xml)
        self.assertIn(
            "<image:caption><![CDATA[Experience the best in HD quality with our premium content....]]></image:caption>",
            xml,
        )
        self.assertNotIn("video:uploader", xml)

    def test_uploader_and_escaping(self) -> None:
        video = Video(**{**DEFAULT_VIDEOS[0], "model": ["Jane Doe"], "title": "A ]]> B"})
        xml = generate_sitemap(self.config, [video], [], TODAY)
        self.assertIn('<video:uploader info="https://example.com/model/jane-doe">Jane Doe</video:uploader>', xml)
        ET.fromstring(xml.encode("utf-8"))

    def test_unreadable_upload_date_counts_from_today(self) -> None:
        self.assertEqual(expiration_date("", TODAY), "2025-02-01")
        self.assertEqual(expiration_date("2024/01/10", TODAY), "2025-02-01")

    def test_video_with_bad_stored_date_still_renders(self) -> None:
        video = Video(**{**DEFAULT_VIDEOS[0], "uploadDate": ""})
        xml = generate_sitemap(self.config, [video], [], TODAY)
        ET.fromstring(xml.encode("utf-8"))
        self.assertIn("<lastmod>2024-02-01</lastmod>", xml)
        self.assertIn("<video:expiration_date>2025-02-01</video:expiration_date>", xml)
        self.assertIn("<video:publication_date>2024-02-01</video:publication_date>", xml)

    def test_caption_truncates_long_descriptions(self) -> None:
        video = Video(**{**DEFAULT_VIDEOS[0], "description": "x" * 150})
        xml = generate_sitemap(self.config, [video], [], TODAY)
        self.assertIn("<![CDATA[" + "x" * 100 + "...]]>", xml)

    def test_simple_sitemap(self) -> None:
        xml = generate_simple_sitemap("https://example.com/", self.videos, TODAY)
        root = ET.fromstring(xml.encode("utf-8"))
        self.assertEqual(len(root.findall(f"{SM}url")), 3 + 6)
        self.assertIn("<loc>https://example.com/category</loc>", xml)
        self.assertIn("<priority>0.7</priority>", xml)


class BuildSitemapFileTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.videos_json = self.root / "videos.json"
        self.categories_json = self.root / "categories.json"
        self.config = SitemapConfig(
            domain="https://example.com",
            output_file=str(self.root / "sitemap.xml"),
            videos_json=str(self.videos_json),
            categories_json=str(self.categories_json),
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_writes_output_file(self) -> None:
        self.videos_json.write_text(json.dumps(DEFAULT_VIDEOS), encoding="utf-8")
        self.categories_json.write_text(json.dumps(DEFAULT_CATEGORIES), encoding="utf-8")
        out = build_sitemap_file(self.config, TODAY)
        self.assertTrue(out.exists())
        self.assertIn("https://example.com/video/1", out.read_text(encoding="utf-8"))

    def test_missing_files(self) -> None:
        with self.assertRaisesRegex(SitemapError, "Videos JSON file not found"):
            build_sitemap_file(self.config)
        self.videos_json.write_text(json.dumps(DEFAULT_VIDEOS), encoding="utf-8")
        with self.assertRaisesRegex(SitemapError, "Categories JSON file not found"):
            build_sitemap_file(self.config)

    def test_invalid_or_empty_json(self) -> None:
        self.videos_json.write_text("{broken", encoding="utf-8")
        self.categories_json.write_text(json.dumps(DEFAULT_CATEGORIES), encoding="utf-8")
        with self.assertRaisesRegex(SitemapError, "Invalid JSON data"):
            build_sitemap_file(self.config)
        self.videos_json.write_text("[]", encoding="utf-8")
        with self.assertRaisesRegex(SitemapError, "Invalid JSON data"):
            build_sitemap_file(self.config)
        self.assertFalse(Path(self.config.output_file).exists())


if __name__ == "__main__":
    unittest.main()
