import unittest

from app.keys import CACHE_KEY_PREFIX, city_from_key, normalize_city_key


class TestNormalizeCityKey(unittest.TestCase):
    def test_trims_and_lowercases(self):
        self.assertEqual(normalize_city_key("  Paris "), "weather:paris")
        self.assertEqual(normalize_city_key("paris"), "weather:paris")
        self.assertEqual(normalize_city_key("  Paris "), normalize_city_key("paris"))

    def test_keeps_inner_spaces_and_diacritics(self):
        self.assertEqual(normalize_city_key("San José"), "weather:san josé")
        self.assertEqual(normalize_city_key("Saint-Étienne"), "weather:saint-étienne")

    def test_stable_when_reapplied_to_unprefixed_form(self):
        key = normalize_city_key(" New York ")
        self.assertEqual(normalize_city_key(city_from_key(key)), key)

    def test_city_from_key_leaves_foreign_keys_alone(self):
        self.assertEqual(city_from_key("other:thing"), "other:thing")
        self.assertTrue(normalize_city_key("x").startswith(CACHE_KEY_PREFIX))


if __name__ == "__main__":
    unittest.main()
