SHOP_A_URL = "https://shopA.example"

STRAINS = [
    {"name": "Lemon Haze", "type": "sativa", "thc_level": 20, "description": "citrus", "internal": "x"},
    {"name": "Super Lemon Haze", "type": "sativa", "thc_level": 22, "description": "sharp"},
    {"name": "Northern Lights", "type": "indica", "thc_level": 18, "description": "calm"},
]


class TestStrainSearch:

    def test_case_insensitive_match(self, shop_client, backend):
        backend.seed(SHOP_A_URL, "strains", STRAINS)

        response = shop_client.get("/api/strains/search", params={"query": "lemon"})

        assert response.status_code == 200
        body = response.json()
        assert [strain["name"] for strain in body] == ["Lemon Haze", "Super Lemon Haze"]
        assert set(body[0]) == {"name", "type", "thc_level", "description"}

    def test_default_limit(self, shop_client, backend):
        shop_client.get("/api/strains/search", params={"query": "haze"})

        (call,) = backend.calls_to("strains")
        assert call.params["limit"] == 7
        assert call.params["name"] == "ilike.*haze*"

    def test_wildcards_in_query_are_dropped(self, shop_client, backend):
        shop_client.get("/api/strains/search", params={"query": "*kush*", "limit": 3})

        (call,) = backend.calls_to("strains")
        assert call.params["name"] == "ilike.*kush*"
        assert call.params["limit"] == 3

    def test_limit_bounds(self, shop_client, backend):
        assert shop_client.get("/api/strains/search", params={"limit": 0}).status_code == 400
