from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Query, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import CurrentUser, get_session, require_owner
from ..domain.errors import NotRestaurantOwnerError, RestaurantNotFoundError
from ..infrastructure.repositories import SqlAlchemyReservationRepository, SqlAlchemyRestaurantRepository
from ..schemas import (
    AvailabilityRead,
    RestaurantBookingsRead,
    RestaurantCreate,
    RestaurantRead,
    RestaurantUpdate,
    parse_slot_date,
)
from ..usecases import availability as availability_usecase
from ..usecases import reservations as reservation_usecase
from ..usecases import restaurants as restaurant_usecase
from ..utils.activity import record_activity

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("", response_model=List[RestaurantRead])
async def list_restaurants(session: AsyncSession = Depends(get_session)) -> list[RestaurantRead]:
    restaurant_repo = SqlAlchemyRestaurantRepository(session)
    rows = await restaurant_usecase.list_restaurants(restaurant_repo)
    return [RestaurantRead.from_db(restaurant=r) for r in rows]


@router.get("/search", response_model=List[RestaurantRead])
async def search_restaurants(
    q: str | None = Query(default=None, description="Substring of name, cuisine or location"),
    session: AsyncSession = Depends(get_session),
) -> list[RestaurantRead]:
    restaurant_repo = SqlAlchemyRestaurantRepository(session)
    try:
        rows = await restaurant_usecase.search_restaurants(restaurant_repo, query=q or "")
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return [RestaurantRead.from_db(restaurant=r) for r in rows]


@router.get("/my", response_model=List[RestaurantRead])
async def list_my_restaurants(
    session: AsyncSession = Depends(get_session),
    current_user: CurrentUser = Depends(require_owner),
) -> list[RestaurantRead]:
    restaurant_repo = SqlAlchemyRestaurantRepository(session)
    rows = await restaurant_usecase.list_owned_restaurants(restaurant_repo, owner_id=current_user.user_id)
    return [RestaurantRead.from_db(restaurant=r) for r in rows]


@router.get("/{restaurant_id}/availability", response_model=AvailabilityRead)
async def get_availability(
    restaurant_id: int = Path(..., ge=1),
    date: str | None = Query(default=None, description="YYYY-MM-DD"),
    time: str | None = Query(default=None, description="Slot label, e.g. 19:00"),
    session: AsyncSession = Depends(get_session),
) -> AvailabilityRead:
    if not date or not time or not time.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query params date and time are required (YYYY-MM-DD and HH:mm)",
        )
    try:
        slot_date = parse_slot_date(date)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    restaurant_repo = SqlAlchemyRestaurantRepository(session)
    res_repo = SqlAlchemyReservationRepository(session)
    try:
        result = await availability_usecase.get_availability(
            restaurant_repo,
            res_repo,
            restaurant_id=restaurant_id,
            date=slot_date,
            time=time,
        )
    except RestaurantNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    return AvailabilityRead.from_domain(result)


@router.get("/{restaurant_id}/bookings", response_model=RestaurantBookingsRead)
async def get_restaurant_bookings(
    restaurant_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
    current_user: CurrentUser = Depends(require_owner),
) -> RestaurantBookingsRead:
    restaurant_repo = SqlAlchemyRestaurantRepository(session)
    res_repo = SqlAlchemyReservationRepository(session)
    try:
        result = await reservation_usecase.list_restaurant_bookings(
            restaurant_repo,
            res_repo,
            restaurant_id=restaurant_id,
            owner_id=current_user.user_id,
        )
    except RestaurantNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    except NotRestaurantOwnerError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    return RestaurantBookingsRead.from_domain(result)


@router.post("", response_model=RestaurantRead, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    payload: RestaurantCreate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    current_user: CurrentUser = Depends(require_owner),
) -> RestaurantRead:
    restaurant_repo = SqlAlchemyRestaurantRepository(session)
    try:
        async with session.begin():
            restaurant = await restaurant_usecase.create_restaurant(
                restaurant_repo,
                owner_id=current_user.user_id,
                name=payload.name,
                cuisine=payload.cuisine,
                location=payload.location,
                rating=payload.rating,
                total_seats=payload.total_seats,
            )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except IntegrityError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Restaurant conflicts with existing data")

    background_tasks.add_task(
        record_activity,
        "create",
        "restaurant",
        restaurant.id,
        current_user.user_id,
        {"name": restaurant.name, "total_seats": restaurant.total_seats},
    )
    return RestaurantRead.from_db(restaurant=restaurant)


@router.put("/{restaurant_id}", response_model=RestaurantRead)
async def update_restaurant(
    payload: RestaurantUpdate,
    background_tasks: BackgroundTasks,
    restaurant_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
    current_user: CurrentUser = Depends(require_owner),
) -> RestaurantRead:
    restaurant_repo = SqlAlchemyRestaurantRepository(session)
    changes = payload.model_dump(exclude_unset=True)
    try:
        async with session.begin():
            restaurant = await restaurant_usecase.update_restaurant(
                restaurant_repo,
                restaurant_id=restaurant_id,
                owner_id=current_user.user_id,
                changes=changes,
            )
    except RestaurantNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    except NotRestaurantOwnerError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to update this restaurant")
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    background_tasks.add_task(record_activity, "update", "restaurant", restaurant.id, current_user.user_id, changes)
    return RestaurantRead.from_db(restaurant=restaurant)


@router.delete("/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_restaurant(
    background_tasks: BackgroundTasks,
    restaurant_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
    current_user: CurrentUser = Depends(require_owner),
) -> Response:
    restaurant_repo = SqlAlchemyRestaurantRepository(session)
    try:
        async with session.begin():
            await restaurant_usecase.delete_restaurant(
                restaurant_repo,
                restaurant_id=restaurant_id,
                owner_id=current_user.user_id,
            )
    except RestaurantNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    except NotRestaurantOwnerError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to delete this restaurant")

    background_tasks.add_task(record_activity, "delete", "restaurant", restaurant_id, current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
