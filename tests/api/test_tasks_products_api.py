from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

from app.core.dependencies import get_product_service, get_task_service
from app.core.exceptions import NotFoundError
from app.database.models import Task
from app.schemas.product import ProductDetailResponse, ProductResponse


def _task(**overrides):
    fields = {
        "id": uuid4(),
        "title": "Review COA",
        "status": "pending",
        "priority": "medium",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return Task(**fields)


def test_list_tasks_filters(test_client, authenticated, override_service):
    tasks = override_service(get_task_service, AsyncMock())
    tasks.list_tasks.return_value = [_task()]

    response = test_client.get("/api/v1/tasks", params={"userId": str(authenticated.id), "status": "pending"})

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 1
    tasks.list_tasks.assert_awaited_once_with(user_id=authenticated.id, status="pending")


def test_list_tasks_rejects_unknown_status(test_client, authenticated, override_service):
    override_service(get_task_service, AsyncMock())

    response = test_client.get("/api/v1/tasks", params={"status": "archived"})

    assert response.status_code == 400


def test_create_task(test_client, authenticated, override_service):
    tasks = override_service(get_task_service, AsyncMock())
    tasks.create_task.return_value = _task(assigned_by=authenticated.id)

    response = test_client.post("/api/v1/tasks", json={"title": "Review COA", "priority": "medium"})

    assert response.status_code == 201
    assert response.json()["data"]["assigned_by"] == str(authenticated.id)
    assert tasks.create_task.call_args.kwargs["creator_id"] == authenticated.id


def test_delete_missing_task(test_client, authenticated, override_service):
    tasks = override_service(get_task_service, AsyncMock())
    tasks.delete_task.side_effect = NotFoundError("Task not found")

    response = test_client.delete(f"/api/v1/tasks/{uuid4()}")

    assert response.status_code == 404


def test_product_detail(test_client, authenticated, override_service, make_product):
    products = override_service(get_product_service, AsyncMock())
    product = make_product()
    products.get_product_detail.return_value = ProductDetailResponse(
        **ProductResponse.model_validate(product).model_dump(), documents=[]
    )

    response = test_client.get(f"/api/v1/products/{product.sku}")

    assert response.status_code == 200
    assert response.json()["data"]["sku"] == "VN1234.01"
    assert response.json()["data"]["documents"] == []


def test_unknown_product(test_client, authenticated, override_service):
    products = override_service(get_product_service, AsyncMock())
    products.get_product_detail.side_effect = NotFoundError("Product XX not found")

    response = test_client.get("/api/v1/products/XX")

    assert response.status_code == 404
    assert response.json()["detail"]["detail"] == "Product XX not found"
