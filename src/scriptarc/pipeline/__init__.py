"""Request construction and resilient execution of remote generation calls."""
