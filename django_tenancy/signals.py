from django.dispatch import Signal

# sender is the Tenancy service; kwargs: request
tenant_resolving = Signal()
landlord_resolving = Signal()

# kwargs: tenant / landlord, request (None outside of a request)
tenant_resolved = Signal()
landlord_resolved = Signal()

# kwargs: tenant / landlord (the context being released)
tenancy_ended = Signal()
landlord_ended = Signal()

# sender is the model class; kwargs: tenant / landlord
tenant_created = Signal()
landlord_created = Signal()
