SHOP_A_URL = "https://shopA.example"


class TestMembers:

    def test_list_ordered_by_card_number(self, shop_client, backend):
        backend.seed(SHOP_A_URL, "members", [{"id": "m1", "card_number": 1}])

        response = shop_client.get("/api/members")

        assert response.json() == [{"id": "m1", "card_number": 1}]
        (call,) = backend.calls_to("members")
        assert call.params["order"] == "card_number.asc"

    def test_delete(self, shop_client, backend):
        backend.seed(SHOP_A_URL, "members", [{"id": "m1"}, {"id": "m2"}])

        response = shop_client.delete("/api/members/m1")

        assert response.json() == {"message": "Member deleted successfully"}
        assert backend.rows(SHOP_A_URL, "members") == [{"id": "m2"}]
