import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_user_id, get_session
from ..domain.errors import CapacityExceededError, InvalidReservationError, RestaurantNotFoundError
from ..infrastructure.locks import restaurant_locks
from ..infrastructure.repositories import SqlAlchemyReservationRepository, SqlAlchemyRestaurantRepository
from ..schemas import ReservationCreate, ReservationRead
from ..usecases import reservations as reservation_usecase
from ..utils.activity import record_activity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.post("", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: ReservationCreate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> ReservationRead:
    try:
        request = reservation_usecase.parse_admission(
            restaurant_id=payload.restaurant_id,
            date=payload.date,
            time=payload.time,
            guests=payload.guests,
            contact_number=payload.contact_number,
            user_id=user_id,
        )
    except InvalidReservationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    restaurant_repo = SqlAlchemyRestaurantRepository(session)
    res_repo = SqlAlchemyReservationRepository(session)
    # The lock must outlive the transaction: the next admission on this restaurant
    # may only read the booked total after this one has committed.
    async with restaurant_locks.hold(request.restaurant_id):
        try:
            async with session.begin():
                reservation, restaurant = await reservation_usecase.create_reservation(
                    restaurant_repo,
                    res_repo,
                    restaurant_id=request.restaurant_id,
                    date=request.date,
                    time=request.time,
                    guests=request.guests,
                    contact_number=request.contact_number,
                    user_id=request.user_id,
                )
        except RestaurantNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
        except CapacityExceededError as exc:
            logger.info(
                "reservation rejected restaurant=%s date=%s time=%s guests=%s available=%s",
                request.restaurant_id,
                request.date,
                request.time,
                request.guests,
                exc.available,
            )
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
        except InvalidReservationError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
        except IntegrityError:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Reservation conflicts with existing data")

    background_tasks.add_task(
        record_activity,
        "create",
        "reservation",
        reservation.id,
        user_id,
        {
            "restaurant_id": reservation.restaurant_id,
            "date": reservation.date,
            "time": reservation.time,
            "guests": reservation.guests,
        },
    )
    return ReservationRead.from_db(reservation=reservation, restaurant=restaurant)


@router.get("/my", response_model=List[ReservationRead])
async def list_my_reservations(
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
) -> list[ReservationRead]:
    res_repo = SqlAlchemyReservationRepository(session)
    rows = await reservation_usecase.list_user_reservations(res_repo, user_id=user_id)
    return [ReservationRead.from_db(reservation=res, restaurant=restaurant) for res, restaurant in rows]
