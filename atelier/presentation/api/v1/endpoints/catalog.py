"""Catalog endpoints — materials, products and clients (upsert and delete)."""

from fastapi import APIRouter, Depends, status

from atelier.application.schemas import ClientDocument, MaterialDocument, ProductDocument
from atelier.application.services import Workspace
from atelier.infrastructure.dependencies import get_workspace

router = APIRouter(tags=["Catalog"])


@router.post("/materials", response_model=MaterialDocument)
async def save_material(
    data: MaterialDocument,
    workspace: Workspace = Depends(get_workspace),
) -> MaterialDocument:
    """Create a material, or replace the one with the same id."""
    material = workspace.save_material(data.to_entity())
    return MaterialDocument.from_entity(material)


@router.delete("/materials/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_material(
    material_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> None:
    workspace.delete_material(material_id)


@router.post("/products", response_model=ProductDocument)
async def save_product(
    data: ProductDocument,
    workspace: Workspace = Depends(get_workspace),
) -> ProductDocument:
    """Create a product, or replace the one with the same id."""
    product = workspace.save_product(data.to_entity())
    return ProductDocument.from_entity(product)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> None:
    workspace.delete_product(product_id)


@router.post("/clients", response_model=ClientDocument)
async def save_client(
    data: ClientDocument,
    workspace: Workspace = Depends(get_workspace),
) -> ClientDocument:
    client = workspace.save_client(data.to_entity())
    return ClientDocument.from_entity(client)


@router.delete("/clients/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> None:
    workspace.delete_client(client_id)
