# ui/crud.py — list / edit / delete pages backed by a FilterableCrudService

from django.conf import settings
from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views import View
from django.views.generic import TemplateView

from backend.exceptions import EntityNotFoundError, UserFriendlyDataError
from backend.services import PageRequest

from .access import RoleRequiredMixin
from .forms import SearchBarForm


class EntityMixin(RoleRequiredMixin):
    service = None
    entity_name = ""
    list_url_name = ""

    def get_entity(self):
        pk = self.kwargs.get("pk")
        if pk is None:
            return self.service.create_new(self.request.user)
        try:
            return self.service.load(pk)
        except EntityNotFoundError:
            raise Http404(f"{self.entity_name} not found")


class EntityListView(EntityMixin, TemplateView):
    title = ""
    new_url_name = ""
    search_placeholder = "Search"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        search = SearchBarForm(
            self.request.GET or None,
            placeholder=self.search_placeholder,
            action_text=f"New {self.entity_name.lower()}",
            action_url=reverse(self.new_url_name),
        )
        page = self.service.find_any_matching(
            search.get_filter(),
            PageRequest(number=self.request.GET.get("page") or 1, size=settings.BAKERY_PAGE_SIZE),
        )
        context.update(title=self.title, search=search, page=page)
        return context


class EntityEditView(EntityMixin, View):
    form_class = None
    template_name = "ui/entity_form.html"

    def get(self, request, *args, **kwargs):
        entity = self.get_entity()
        return self._render(entity, self.form_class(instance=entity))

    def post(self, request, *args, **kwargs):
        entity = self.get_entity()
        form = self.form_class(request.POST, instance=entity)
        if form.is_valid():
            try:
                self.service.save(request.user, form.save(commit=False))
            except UserFriendlyDataError as e:
                form.add_error(None, e.message)
            else:
                messages.success(request, f"{self.entity_name} saved.")
                return redirect(self.list_url_name)
        return self._render(entity, form)

    def _render(self, entity, form):
        return render(self.request, self.template_name, {
            "entity": entity,
            "entity_name": self.entity_name,
            "form": form,
            "cancel_url": reverse(self.list_url_name),
        })


class EntityDeleteView(EntityMixin, View):
    """Asks for confirmation on GET, deletes on POST."""

    template_name = "ui/confirm_delete.html"

    def get(self, request, *args, **kwargs):
        return render(request, self.template_name, {
            "entity": self.get_entity(),
            "entity_name": self.entity_name,
            "cancel_url": reverse(self.list_url_name),
        })

    def post(self, request, *args, **kwargs):
        entity = self.get_entity()
        try:
            self.service.delete(request.user, entity)
        except UserFriendlyDataError as e:
            messages.error(request, e.message)
        else:
            messages.success(request, f"{self.entity_name} deleted.")
        return redirect(self.list_url_name)
