# backend/routes/dishes.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from schemas.dish import DishOut
from utils.errors import NotFound, ValidationFailed
from utils.pipeline import Pipeline, RequestContext, build_context, json_response, parse_int
from utils.tokenJWT import authenticate

router = APIRouter(prefix="/dishes", tags=["Dishes"])

# The menu is read-only through the API


def _list_dishes(ctx: RequestContext):
    return json_response([DishOut.model_validate(d) for d in ctx.store.dishes.list_all()])

def _get_dish(ctx: RequestContext):
    dish_id = parse_int(ctx.request.path_params.get("dish_id"))
    if dish_id is None:
        raise ValidationFailed("Invalid dish ID.")
    dish = ctx.store.dishes.get(dish_id)
    if dish is None:
        raise NotFound("The dish was not found.")
    return json_response(DishOut.model_validate(dish))


list_dishes_pipeline = Pipeline(authenticate, handler=_list_dishes)
get_dish_pipeline = Pipeline(authenticate, handler=_get_dish)


@router.get("")
async def list_dishes(request: Request, db: Session = Depends(get_db)):
    return await list_dishes_pipeline(build_context(request, db))

@router.get("/{dish_id}")
async def get_dish(dish_id: str, request: Request, db: Session = Depends(get_db)):
    return await get_dish_pipeline(build_context(request, db))
