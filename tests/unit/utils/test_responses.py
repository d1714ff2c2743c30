from app.schemas.product import ProductUpdate
from app.utils.responses import create_api_response, create_error_detail


def test_list_data_is_wrapped_with_total():
    response = create_api_response(data=[ProductUpdate(brand="A"), {"x": 1}])

    assert response["status"] is True
    assert response["data"]["total"] == 2
    assert response["data"]["items"][0]["brand"] == "A"
    assert response["meta"]["api_version"] == "v1"
    assert response["meta"]["request_id"]


def test_dict_values_are_dumped():
    response = create_api_response(data={"product": ProductUpdate(unit_count=30)}, message="ok")

    assert response["message"] == "ok"
    assert response["data"]["product"]["unit_count"] == 30


def test_error_detail_without_request():
    detail = create_error_detail(title="Not Found", status=404, detail="Missing", instance="/x")

    assert detail.status == 404
    assert detail.instance == "/x"
    assert detail.request_id
