from src.service.film_booking.domain.entity.film_entity import Film


class TestFilm:
    def test_seat_numbers_are_one_based(self) -> None:
        film = Film(id='f', name='Dune', price=10.0, seat_capacity=3)

        assert list(film.seat_numbers) == [1, 2, 3]
        assert film.has_seat(1)
        assert film.has_seat(3)
        assert not film.has_seat(0)
        assert not film.has_seat(4)

    def test_formatted_duration(self) -> None:
        assert Film(id='f', name='Dune', price=10.0, seat_capacity=3, duration=155).formatted_duration() == '2h 35m'

    def test_formatted_duration_without_duration(self) -> None:
        assert Film(id='f', name='Dune', price=10.0, seat_capacity=3).formatted_duration() == ''
